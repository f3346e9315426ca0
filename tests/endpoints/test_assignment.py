from datetime import datetime, timedelta

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from campus_notify.models.notification import Notification
from tests.helpers.asserts import api_call, data_of

def _payload(group, **extra):
    return {
        "group_id": group.id,
        "title": "Essay on the French Revolution",
        "deadline": (datetime.utcnow() + timedelta(days=7)).isoformat(),
        **extra,
    }

def test_only_teachers_create_assignments(client: TestClient, make_group, make_student, make_admin, auth_headers):
    group = make_group()
    for account in (make_student(group=group), make_admin()):
        r = client.post("/assignments/", headers=auth_headers(account), json=_payload(group))
        assert r.status_code == 403
        assert r.json()["code"] == "FORBIDDEN"

def test_create_for_unknown_group(client: TestClient, make_teacher, auth_headers):
    r = client.post("/assignments/", headers=auth_headers(make_teacher()), json={
        "group_id": 999,
        "title": "Lost",
        "deadline": datetime.utcnow().isoformat(),
    })
    assert r.status_code == 404

def test_draft_then_publish_once(client: TestClient, db_session: Session, make_group, make_student, make_teacher, auth_headers):
    group = make_group()
    make_student(group=group)
    teacher = make_teacher()
    headers = auth_headers(teacher)

    print("[1] Creating a draft sends nothing")
    assignment = data_of(api_call(client, "POST", "/assignments/", headers=headers, json=_payload(group)))
    assert assignment["published_at"] is None
    assert db_session.query(Notification).count() == 0

    print("[2] Publishing notifies the group")
    published = data_of(api_call(client, "POST", f"/assignments/{assignment['id']}/publish", headers=headers))
    assert published["published_at"] is not None
    assert db_session.query(Notification).count() == 1

    print("[3] Publishing again is a conflict")
    r = client.post(f"/assignments/{assignment['id']}/publish", headers=headers)
    assert r.status_code == 409
    assert db_session.query(Notification).count() == 1

    print("[4] Another teacher cannot publish it")
    r = client.post(f"/assignments/{assignment['id']}/publish", headers=auth_headers(make_teacher()))
    assert r.status_code == 403

def test_submit_and_grade(client: TestClient, make_group, make_student, make_teacher, auth_headers):
    group = make_group()
    student = make_student(group=group)
    teacher = make_teacher()
    assignment = data_of(api_call(
        client, "POST", "/assignments/", headers=auth_headers(teacher),
        json=_payload(group, max_score=20, publish_immediately=True),
    ))

    submission = data_of(api_call(
        client, "POST", f"/assignments/{assignment['id']}/submissions",
        headers=auth_headers(student), json={"content": "My essay"},
    ))
    assert submission["status"] == "submitted"

    r = client.post(f"/assignments/{assignment['id']}/submissions", headers=auth_headers(student), json={"content": "Again"})
    assert r.status_code == 409

    r = client.post(f"/assignments/submissions/{submission['id']}/grade", headers=auth_headers(teacher), json={"score": 25})
    assert r.status_code == 422

    graded = data_of(api_call(
        client, "POST", f"/assignments/submissions/{submission['id']}/grade",
        headers=auth_headers(teacher), json={"score": 18, "feedback": "Well argued"},
    ))
    assert graded["status"] == "graded"
    assert graded["score"] == 18

def test_cannot_submit_to_draft(client: TestClient, make_group, make_student, make_teacher, auth_headers):
    group = make_group()
    student = make_student(group=group)
    assignment = data_of(api_call(client, "POST", "/assignments/", headers=auth_headers(make_teacher()), json=_payload(group)))

    r = client.post(f"/assignments/{assignment['id']}/submissions", headers=auth_headers(student), json={})
    assert r.status_code == 404
