from enum import Enum


class UserTypeEnum(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"

class PriorityEnum(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"

HIGH_PRIORITIES = (PriorityEnum.HIGH.value, PriorityEnum.URGENT.value)

class MessageTypeEnum(str, Enum):
    DIRECT = "direct"
    BROADCAST = "broadcast"
    ANNOUNCEMENT = "announcement"

# Broadcast and announcement keep read-state on message_recipients rows
RECIPIENT_LIST_MESSAGE_TYPES = (MessageTypeEnum.BROADCAST.value, MessageTypeEnum.ANNOUNCEMENT.value)

class ChannelEnum(str, Enum):
    EMAIL = "email"
    PUSH = "push"
    SMS = "sms"
    IN_APP = "in_app"

class NotificationType:
    # Fan-out events
    NEW_ASSIGNMENT = "new_assignment"
    ASSIGNMENT_GRADED = "assignment_graded"
    NEW_TEST = "new_test"
    TEST_GRADED = "test_graded"
    NEW_MESSAGE = "new_message"
    FORUM_REPLY = "forum_reply"

    # Settings catalogue
    ASSIGNMENT_DUE = "assignment_due"
    ASSIGNMENT_POSTED = "assignment_posted"
    ASSIGNMENT_SUBMITTED = "assignment_submitted"
    TEST_AVAILABLE = "test_available"
    TEST_ENDING_SOON = "test_ending_soon"
    GRADE_POSTED = "grade_posted"
    GRADE_UPDATED = "grade_updated"
    ATTENDANCE_MARKED = "attendance_marked"
    ATTENDANCE_WARNING = "attendance_warning"
    ANNOUNCEMENT = "announcement"
    MESSAGE_RECEIVED = "message_received"
    COMMENT_POSTED = "comment_posted"

DEFAULT_NOTIFICATION_TYPES = [
    NotificationType.ASSIGNMENT_DUE,
    NotificationType.ASSIGNMENT_GRADED,
    NotificationType.ASSIGNMENT_POSTED,
    NotificationType.ASSIGNMENT_SUBMITTED,
    NotificationType.TEST_AVAILABLE,
    NotificationType.TEST_ENDING_SOON,
    NotificationType.TEST_GRADED,
    NotificationType.GRADE_POSTED,
    NotificationType.GRADE_UPDATED,
    NotificationType.ATTENDANCE_MARKED,
    NotificationType.ATTENDANCE_WARNING,
    NotificationType.ANNOUNCEMENT,
    NotificationType.MESSAGE_RECEIVED,
    NotificationType.COMMENT_POSTED,
]

EMAIL_ENABLED_TYPES = {
    NotificationType.ASSIGNMENT_DUE,
    NotificationType.ASSIGNMENT_GRADED,
    NotificationType.TEST_AVAILABLE,
    NotificationType.TEST_GRADED,
    NotificationType.GRADE_POSTED,
    NotificationType.ATTENDANCE_WARNING,
    NotificationType.ANNOUNCEMENT,
}

PUSH_DISABLED_TYPES = {
    NotificationType.COMMENT_POSTED,  # too frequent
}

class LikeableTypeEnum(str, Enum):
    TOPIC = "topic"
    POST = "post"

class SubscribableTypeEnum(str, Enum):
    TOPIC = "topic"
    CATEGORY = "category"

class SubmissionStatusEnum(str, Enum):
    SUBMITTED = "submitted"
    GRADED = "graded"

class ExamAttemptStatusEnum(str, Enum):
    IN_PROGRESS = "in_progress"
    GRADED = "graded"
