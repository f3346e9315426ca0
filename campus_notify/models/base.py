# Import every model so Base.metadata is complete for Alembic and create_all.
from campus_notify.core.database import Base
from campus_notify.models.user import Group, Student, Teacher, Admin
from campus_notify.models.notification import Notification, NotificationSettings
from campus_notify.models.message import Message, MessageRecipient
from campus_notify.models.forum import ForumCategory, ForumTopic, ForumPost, ForumLike, ForumSubscription
from campus_notify.models.assignment import Assignment, AssignmentSubmission
from campus_notify.models.exam import Exam, ExamAttempt
