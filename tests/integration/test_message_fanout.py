from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from campus_notify.models.notification import Notification
from tests.helpers.asserts import api_call, data_of

def test_direct_message_notifies_receiver(
    client: TestClient, db_session: Session, make_student, make_teacher, auth_headers
):
    teacher = make_teacher()
    student = make_student()
    payload = {
        "receiver_id": teacher.id,
        "receiver_type": "teacher",
        "subject": "Missed class",
        "body": "I was ill on Monday.",
        "priority": "high",
    }
    message = data_of(api_call(client, "POST", "/messages/", headers=auth_headers(student), json=payload))

    rows = db_session.query(Notification).all()
    assert len(rows) == 1
    notification = rows[0]
    assert (notification.user_id, notification.user_type) == (teacher.id, "teacher")
    assert notification.type == "new_message"
    assert notification.priority == "high"
    assert notification.action_url == f"/teacher/messages/{message['id']}"
    assert notification.payload == {"message_id": message["id"], "sender_id": student.id, "sender_type": "student"}

def test_broadcast_notifies_each_recipient_in_order(
    client: TestClient, db_session: Session, make_admin, make_student, make_teacher, auth_headers
):
    print("\n[TEST] Broadcast fan-out")
    admin = make_admin()
    students = [make_student() for _ in range(2)]
    teacher = make_teacher()
    recipients = [
        {"id": teacher.id, "type": "teacher"},
        {"id": students[0].id, "type": "student"},
        {"id": students[1].id, "type": "student"},
    ]
    payload = {"message_type": "broadcast", "recipients": recipients, "subject": "Fire drill", "body": "At noon."}
    message = data_of(api_call(client, "POST", "/messages/", headers=auth_headers(admin), json=payload))

    rows = db_session.query(Notification).order_by(Notification.id).all()
    assert [(n.user_id, n.user_type) for n in rows] == [(r["id"], r["type"]) for r in recipients]
    assert [n.action_url for n in rows] == [
        f"/teacher/messages/{message['id']}",
        f"/student/messages/{message['id']}",
        f"/student/messages/{message['id']}",
    ]
    print("[OK] One notification per recipient")

    print("[INFO] The sender is not notified")
    assert data_of(client.get("/notifications/unread-count", headers=auth_headers(admin)))["count"] == 0
    for student in students:
        assert data_of(client.get("/notifications/unread-count", headers=auth_headers(student)))["count"] == 1
