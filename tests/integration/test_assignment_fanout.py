from datetime import datetime

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from campus_notify.models.notification import Notification
from tests.helpers.asserts import api_call, data_of

def test_group_assignment_notifies_every_active_student(
    client: TestClient, db_session: Session, make_group, make_student, make_teacher, auth_headers
):
    """
    A group with three active students, one inactive student and one student in
    another group: publishing writes exactly three unread notifications.
    """
    print("\n[TEST] Group assignment fan-out")
    group = make_group("10-A")
    other_group = make_group("10-B")
    members = [make_student(group=group) for _ in range(3)]
    inactive = make_student(group=group, is_active=False)
    outsider = make_student(group=other_group)
    teacher = make_teacher()

    print("[1] Publishing the assignment")
    payload = {
        "group_id": group.id,
        "title": "Lab report",
        "deadline": datetime(2026, 11, 20, 23, 59).isoformat(),
        "publish_immediately": True,
    }
    assignment = data_of(api_call(client, "POST", "/assignments/", headers=auth_headers(teacher), json=payload))
    print("[OK] Assignment published")

    print("[2] Checking notifications")
    rows = db_session.query(Notification).order_by(Notification.id).all()
    assert [(n.user_id, n.user_type) for n in rows] == [(s.id, "student") for s in members]
    for n in rows:
        assert n.type == "new_assignment"
        assert n.is_read is False
        assert n.title == "New assignment"
        assert "20.11.2026" in n.message
        assert n.action_url == "/student/assignments"
        assert n.payload["assignment_id"] == assignment["id"]
        assert n.entity_type == "assignment"
        assert n.entity_id == assignment["id"]

    print("[3] Recipients see it in their feed, others do not")
    feed = data_of(client.get("/notifications/", headers=auth_headers(members[0])))
    assert feed["total"] == 1
    assert data_of(client.get("/notifications/", headers=auth_headers(outsider)))["total"] == 0
    assert db_session.query(Notification).filter(Notification.user_id == inactive.id).count() == 0
    print("[SUCCESS] Group fan-out verified")

def test_publishing_to_an_empty_group_writes_nothing(
    client: TestClient, db_session: Session, make_group, make_teacher, auth_headers
):
    group = make_group()
    payload = {"group_id": group.id, "title": "Nobody home", "deadline": datetime.utcnow().isoformat(), "publish_immediately": True}
    api_call(client, "POST", "/assignments/", headers=auth_headers(make_teacher()), json=payload)
    assert db_session.query(Notification).count() == 0

def test_grading_notifies_only_the_submitter(
    client: TestClient, db_session: Session, make_group, make_student, make_teacher, auth_headers
):
    group = make_group()
    author = make_student(group=group)
    make_student(group=group)
    teacher = make_teacher()
    payload = {"group_id": group.id, "title": "Poem", "deadline": datetime.utcnow().isoformat(), "publish_immediately": True}
    assignment = data_of(api_call(client, "POST", "/assignments/", headers=auth_headers(teacher), json=payload))
    submission = data_of(api_call(
        client, "POST", f"/assignments/{assignment['id']}/submissions", headers=auth_headers(author), json={"content": "Roses"},
    ))

    api_call(client, "POST", f"/assignments/submissions/{submission['id']}/grade", headers=auth_headers(teacher), json={"score": 92.5})

    graded = db_session.query(Notification).filter(Notification.type == "assignment_graded").all()
    assert len(graded) == 1
    assert (graded[0].user_id, graded[0].user_type) == (author.id, "student")
    assert "92.5" in graded[0].message
    assert graded[0].payload["submission_id"] == submission["id"]

def test_marking_read_is_per_recipient_and_repeatable(
    client: TestClient, db_session: Session, make_group, make_student, make_teacher, auth_headers
):
    group = make_group()
    student_a = make_student(group=group)
    student_b = make_student(group=group)
    payload = {"group_id": group.id, "title": "Essay", "deadline": datetime.utcnow().isoformat(), "publish_immediately": True}
    api_call(client, "POST", "/assignments/", headers=auth_headers(make_teacher()), json=payload)

    note_a = db_session.query(Notification).filter(Notification.user_id == student_a.id).one()
    note_b = db_session.query(Notification).filter(Notification.user_id == student_b.id).one()

    print("[1] A marks the notification read")
    first = data_of(api_call(client, "POST", f"/notifications/{note_a.id}/read", headers=auth_headers(student_a)))
    assert first["is_read"] is True
    assert data_of(client.get("/notifications/unread-count", headers=auth_headers(student_b)))["count"] == 1

    print("[2] Marking it read again changes nothing")
    second = data_of(api_call(client, "POST", f"/notifications/{note_a.id}/read", headers=auth_headers(student_a)))
    assert second["read_at"] == first["read_at"]
    assert db_session.query(Notification).count() == 2
    db_session.refresh(note_b)
    assert note_b.is_read is False
    assert note_b.read_at is None
