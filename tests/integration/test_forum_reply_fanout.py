from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from campus_notify.models.forum import ForumCategory, ForumSubscription
from campus_notify.models.notification import Notification
from tests.helpers.asserts import api_call, data_of

def _category(db_session: Session) -> ForumCategory:
    category = ForumCategory(name="Homework help", slug="homework-help")
    db_session.add(category)
    db_session.commit()
    return category

def _topic(client, headers, category):
    payload = {"category_id": category.id, "title": "Stuck on derivatives", "body": "Any hints?"}
    return data_of(api_call(client, "POST", "/forum/topics", headers=headers, json=payload))

def test_reply_notifies_author_and_subscribers(
    client: TestClient, db_session: Session, make_student, make_teacher, auth_headers
):
    """
    Author A, subscribers B and C; C replies. A and B are notified, C is not.
    """
    print("\n[TEST] Forum reply fan-out")
    category = _category(db_session)
    author, subscriber, replier = make_student(), make_student(), make_teacher()

    topic = _topic(client, auth_headers(author), category)
    api_call(client, "POST", f"/forum/topics/{topic['id']}/subscribe", headers=auth_headers(subscriber))
    api_call(client, "POST", f"/forum/topics/{topic['id']}/subscribe", headers=auth_headers(replier))

    print("[1] Replying")
    post = data_of(api_call(client, "POST", f"/forum/topics/{topic['id']}/posts", headers=auth_headers(replier), json={"body": "Try the chain rule"}))

    print("[2] Checking notifications")
    rows = db_session.query(Notification).order_by(Notification.id).all()
    assert [(n.user_id, n.user_type) for n in rows] == [(author.id, "student"), (subscriber.id, "student")]
    assert all(n.type == "forum_reply" for n in rows)
    assert rows[0].action_url == f"/student/forum/topics/{topic['id']}"
    assert rows[0].payload == {"topic_id": topic["id"], "post_id": post["id"]}

    print("[3] Subscriptions other than the replier's are stamped")
    subscriptions = {s.user_type: s for s in db_session.query(ForumSubscription).all()}
    assert subscriptions["student"].last_notified_at is not None
    assert subscriptions["teacher"].last_notified_at is None
    print("[SUCCESS] Reply fan-out verified")

def test_author_who_subscribes_is_notified_twice(
    client: TestClient, db_session: Session, make_student, auth_headers
):
    category = _category(db_session)
    author, replier = make_student(), make_student()
    topic = _topic(client, auth_headers(author), category)
    api_call(client, "POST", f"/forum/topics/{topic['id']}/subscribe", headers=auth_headers(author))

    api_call(client, "POST", f"/forum/topics/{topic['id']}/posts", headers=auth_headers(replier), json={"body": "Reply"})

    rows = db_session.query(Notification).filter(Notification.user_id == author.id).all()
    assert len(rows) == 2

def test_author_replying_to_own_topic_notifies_nobody_else(
    client: TestClient, db_session: Session, make_student, auth_headers
):
    category = _category(db_session)
    author = make_student()
    topic = _topic(client, auth_headers(author), category)
    api_call(client, "POST", f"/forum/topics/{topic['id']}/subscribe", headers=auth_headers(author))

    api_call(client, "POST", f"/forum/topics/{topic['id']}/posts", headers=auth_headers(author), json={"body": "Bump"})
    assert db_session.query(Notification).count() == 0

def test_subscriber_with_same_id_but_other_kind_is_still_notified(
    client: TestClient, db_session: Session, make_student, make_teacher, auth_headers
):
    category = _category(db_session)
    author = make_student()
    replier = make_student()
    teacher = make_teacher()
    teacher_twin = make_teacher()
    assert teacher_twin.id == replier.id

    topic = _topic(client, auth_headers(author), category)
    api_call(client, "POST", f"/forum/topics/{topic['id']}/subscribe", headers=auth_headers(teacher_twin))

    api_call(client, "POST", f"/forum/topics/{topic['id']}/posts", headers=auth_headers(replier), json={"body": "Reply"})
    recipients = [(n.user_id, n.user_type) for n in db_session.query(Notification).order_by(Notification.id)]
    assert recipients == [(author.id, "student"), (teacher_twin.id, "teacher")]
    assert teacher.id != teacher_twin.id
