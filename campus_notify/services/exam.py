import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from campus_notify.core.constants import ExamAttemptStatusEnum
from campus_notify.crud.exam import exam as crud_exam
from campus_notify.crud.exam import exam_attempt as crud_attempt
from campus_notify.crud.user import group as crud_group
from campus_notify.models.exam import Exam, ExamAttempt
from campus_notify.schemas.exam import ExamAttemptGrade, ExamCreate
from campus_notify.schemas.user import Actor
from campus_notify.services.notification import notification_service

logger = logging.getLogger(__name__)

class ExamService:

    def _get_owned_exam(self, db: Session, *, exam_id: int, teacher: Actor) -> Exam:
        exam = crud_exam.get(db, id=exam_id)
        if not exam:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Test not found.")
        if exam.teacher_id != teacher.user_id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You do not own this test.")
        return exam

    def create_exam(self, db: Session, *, exam_in: ExamCreate, teacher: Actor) -> Exam:
        if not crud_group.get(db, id=exam_in.group_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Group not found.")
        if exam_in.end_time is not None and exam_in.end_time <= exam_in.start_time:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="end_time must be after start_time.",
            )
        exam = crud_exam.create(
            db, obj_in={**exam_in.model_dump(exclude={"publish_immediately"}), "teacher_id": teacher.user_id}
        )
        if exam_in.publish_immediately:
            self._publish(db, exam=exam)
        return exam

    def _publish(self, db: Session, *, exam: Exam) -> Exam:
        crud_exam.publish(db, exam=exam)
        notification_service.notify_test_published(db, exam=exam)
        logger.info(f"Test {exam.id} published to group {exam.group_id}")
        return exam

    def publish_exam(self, db: Session, *, exam_id: int, teacher: Actor) -> Exam:
        exam = self._get_owned_exam(db, exam_id=exam_id, teacher=teacher)
        if exam.published_at is not None:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Test is already published.")
        return self._publish(db, exam=exam)

    def start_attempt(self, db: Session, *, exam_id: int, student: Actor) -> ExamAttempt:
        exam = crud_exam.get(db, id=exam_id)
        if not exam or exam.published_at is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Test not found.")
        attempt = crud_attempt.get_in_progress(db, exam_id=exam.id, student_id=student.user_id)
        if attempt:
            return attempt
        return crud_attempt.create(
            db,
            obj_in={
                "exam_id": exam.id,
                "student_id": student.user_id,
                "status": ExamAttemptStatusEnum.IN_PROGRESS.value,
            },
        )

    def grade_attempt(self, db: Session, *, attempt_id: int, grade_in: ExamAttemptGrade, teacher: Actor) -> ExamAttempt:
        attempt = crud_attempt.get(db, id=attempt_id)
        if not attempt:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Attempt not found.")
        self._get_owned_exam(db, exam_id=attempt.exam_id, teacher=teacher)
        crud_attempt.grade(db, attempt=attempt, score=grade_in.score)
        notification_service.notify_test_graded(db, attempt=attempt)
        return attempt

exam_service = ExamService()
