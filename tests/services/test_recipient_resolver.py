from sqlalchemy.orm import Session

from campus_notify.models.forum import ForumCategory, ForumPost, ForumSubscription, ForumTopic
from campus_notify.models.message import Message, MessageRecipient
from campus_notify.services.recipient_resolver import recipient_resolver
from campus_notify.schemas.user import Actor

def _pairs(actors):
    return [(a.user_id, a.user_type) for a in actors]

def test_group_returns_active_students_by_id(db_session: Session, make_group, make_student):
    group = make_group()
    other = make_group()
    second = make_student(group=group)
    make_student(group=group, is_active=False)
    make_student(group=other)
    fourth = make_student(group=group)

    assert _pairs(recipient_resolver.for_group(db_session, group_id=group.id)) == [
        (second.id, "student"),
        (fourth.id, "student"),
    ]
    assert recipient_resolver.for_group(db_session, group_id=999) == []

def test_direct_and_broadcast_messages(db_session: Session):
    direct = Message(sender_id=1, sender_type="teacher", receiver_id=7, receiver_type="student", subject="s", body="b", message_type="direct")
    assert _pairs(recipient_resolver.for_message(direct)) == [(7, "student")]

    broadcast = Message(sender_id=1, sender_type="admin", subject="s", body="b", message_type="broadcast")
    db_session.add(broadcast)
    db_session.flush()
    db_session.add_all([
        MessageRecipient(message_id=broadcast.id, recipient_id=4, recipient_type="teacher"),
        MessageRecipient(message_id=broadcast.id, recipient_id=2, recipient_type="student"),
    ])
    db_session.flush()
    db_session.refresh(broadcast)
    assert _pairs(recipient_resolver.for_message(broadcast)) == [(4, "teacher"), (2, "student")]

def _topic(db_session: Session, author: Actor) -> ForumTopic:
    category = ForumCategory(name="General", slug="general")
    db_session.add(category)
    db_session.flush()
    topic = ForumTopic(
        category_id=category.id,
        author_id=author.user_id,
        author_type=author.user_type,
        title="t",
        slug="t-abc123",
        body="b",
    )
    db_session.add(topic)
    db_session.flush()
    return topic

def _subscribe(db_session: Session, topic: ForumTopic, user_id: int, user_type: str):
    db_session.add(ForumSubscription(subscribable_type="topic", subscribable_id=topic.id, user_id=user_id, user_type=user_type))
    db_session.flush()

def test_forum_reply_audience(db_session: Session):
    topic = _topic(db_session, Actor(user_id=1, user_type="student"))
    _subscribe(db_session, topic, 1, "student")
    _subscribe(db_session, topic, 3, "teacher")
    _subscribe(db_session, topic, 3, "student")

    post = ForumPost(topic_id=topic.id, author_id=3, author_type="student", body="reply")
    assert _pairs(recipient_resolver.for_forum_reply(db_session, topic=topic, post=post)) == [
        (1, "student"),
        (1, "student"),
        (3, "teacher"),
    ]

    own_post = ForumPost(topic_id=topic.id, author_id=1, author_type="student", body="bump")
    assert _pairs(recipient_resolver.for_forum_reply(db_session, topic=topic, post=own_post)) == [
        (3, "teacher"),
        (3, "student"),
    ]
