from datetime import datetime, timedelta

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from campus_notify.models.notification import Notification
from campus_notify.services.notification import notification_service
from tests.helpers.asserts import actor_for, api_call, data_of

def _seed(db_session: Session, account, count=1, **fields):
    created = []
    for i in range(count):
        created.append(
            notification_service.create_notification(
                db_session,
                recipient=actor_for(account),
                notification_type=fields.get("notification_type", "new_assignment"),
                title=f"Notification {i}",
                message="Something happened",
                priority=fields.get("priority", "normal"),
                expires_at=fields.get("expires_at"),
            )
        )
    db_session.commit()
    return created

def test_requires_authentication(client: TestClient):
    response = client.get("/notifications/")
    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "UNAUTHORIZED"
    assert "request_id" in body

def test_rejects_invalid_token(client: TestClient):
    response = client.get("/notifications/", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401

def test_rejects_inactive_account(client: TestClient, make_student, auth_headers):
    student = make_student(is_active=False)
    response = client.get("/notifications/", headers=auth_headers(student))
    assert response.status_code == 401

def test_list_and_filters(client: TestClient, db_session: Session, make_student, auth_headers):
    student = make_student()
    headers = auth_headers(student)
    _seed(db_session, student, count=3)
    _seed(db_session, student, notification_type="new_message", priority="urgent")

    print("[1] Listing all notifications")
    page = data_of(api_call(client, "GET", "/notifications/", headers=headers))
    assert page["total"] == 4
    assert page["page"] == 1
    assert page["items"][0]["type"] == "new_message"
    assert page["items"][0]["is_high_priority"] is True
    assert page["items"][-1]["is_high_priority"] is False
    assert page["items"][0]["is_expired"] is False

    print("[2] Filtering by type and priority")
    r = client.get("/notifications/", headers=headers, params={"type": "new_message"})
    assert data_of(r)["total"] == 1
    r = client.get("/notifications/", headers=headers, params={"high_priority": True})
    assert data_of(r)["total"] == 1
    r = client.get("/notifications/", headers=headers, params={"priority": "low"})
    assert data_of(r)["total"] == 0

    print("[3] Pagination beyond the limit is rejected")
    r = client.get("/notifications/", headers=headers, params={"size": 1000})
    assert r.status_code == 422
    assert r.json()["code"] == "VALIDATION_ERROR"
    assert r.json()["errors"]

def test_expired_notifications_are_hidden(client: TestClient, db_session: Session, make_student, auth_headers):
    student = make_student()
    headers = auth_headers(student)
    _seed(db_session, student, count=2)
    _seed(db_session, student, expires_at=datetime.utcnow() - timedelta(hours=1))

    assert data_of(client.get("/notifications/", headers=headers))["total"] == 2
    assert data_of(client.get("/notifications/unread-count", headers=headers))["count"] == 2

def test_get_marks_read_and_unread_cycle(client: TestClient, db_session: Session, make_student, auth_headers):
    student = make_student()
    headers = auth_headers(student)
    notification = _seed(db_session, student)[0]

    print("[1] Viewing a notification marks it read")
    data = data_of(api_call(client, "GET", f"/notifications/{notification.id}", headers=headers))
    assert data["is_read"] is True
    assert data["read_at"] is not None

    print("[2] Marking unread clears read_at")
    data = data_of(api_call(client, "POST", f"/notifications/{notification.id}/unread", headers=headers))
    assert data["is_read"] is False
    assert data["read_at"] is None

    print("[3] Marking read again")
    data = data_of(api_call(client, "POST", f"/notifications/{notification.id}/read", headers=headers))
    assert data["is_read"] is True

def test_mark_all_read_returns_count_then_zero(client: TestClient, db_session: Session, make_student, auth_headers):
    student = make_student()
    other = make_student()
    headers = auth_headers(student)
    _seed(db_session, student, count=3)
    _seed(db_session, other, count=2)

    r = api_call(client, "POST", "/notifications/mark-all-read", headers=headers)
    assert data_of(r)["count"] == 3
    r = api_call(client, "POST", "/notifications/mark-all-read", headers=headers)
    assert data_of(r)["count"] == 0

    assert data_of(client.get("/notifications/unread-count", headers=headers))["count"] == 0
    assert data_of(client.get("/notifications/unread-count", headers=auth_headers(other)))["count"] == 2

def test_foreign_notification_is_not_found(client: TestClient, db_session: Session, make_student, make_teacher, auth_headers):
    owner = make_student()
    intruder = make_student()
    notification = _seed(db_session, owner)[0]

    for method, path in (
        ("GET", f"/notifications/{notification.id}"),
        ("POST", f"/notifications/{notification.id}/read"),
        ("POST", f"/notifications/{notification.id}/unread"),
    ):
        r = client.request(method, path, headers=auth_headers(intruder))
        assert r.status_code == 404, path
        assert r.json()["code"] == "NOT_FOUND"

    # A teacher with the same numeric id is a different owner
    teacher = make_teacher()
    assert teacher.id == owner.id
    r = client.get(f"/notifications/{notification.id}", headers=auth_headers(teacher))
    assert r.status_code == 404

    db_session.refresh(notification)
    assert notification.is_read is False

def test_unread_recent_and_stats(client: TestClient, db_session: Session, make_student, auth_headers):
    student = make_student()
    headers = auth_headers(student)
    _seed(db_session, student, count=2)
    _seed(db_session, student, notification_type="new_message", priority="urgent")
    old = _seed(db_session, student)[0]
    old.created_at = datetime.utcnow() - timedelta(days=10)
    old.is_read = True
    db_session.commit()

    unread = data_of(client.get("/notifications/unread", headers=headers))
    assert unread["total"] == 3

    recent = data_of(client.get("/notifications/recent", headers=headers))
    assert len(recent) == 3
    assert all(item["id"] != old.id for item in recent)

    stats = data_of(client.get("/notifications/stats", headers=headers))
    assert stats["total"] == 4
    assert stats["unread"] == 3
    assert stats["read"] == 1
    assert stats["recent"] == 3
    assert stats["urgent"] == 1
    assert stats["by_type"] == {"new_assignment": 3, "new_message": 1}

def test_unread_count_matches_direct_query(client: TestClient, db_session: Session, make_student, auth_headers):
    student = make_student()
    headers = auth_headers(student)
    created = _seed(db_session, student, count=5)

    client.post(f"/notifications/{created[0].id}/read", headers=headers)
    client.get(f"/notifications/{created[1].id}", headers=headers)
    client.post(f"/notifications/{created[0].id}/unread", headers=headers)
    _seed(db_session, student, count=2)
    client.post(f"/notifications/{created[2].id}/read", headers=headers)

    expected = (
        db_session.query(Notification)
        .filter(
            Notification.user_id == student.id,
            Notification.user_type == "student",
            Notification.is_read == False,
        )
        .count()
    )
    assert expected == 5
    assert data_of(client.get("/notifications/unread-count", headers=headers))["count"] == expected
