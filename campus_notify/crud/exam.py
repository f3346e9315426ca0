from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from campus_notify.core.constants import ExamAttemptStatusEnum
from campus_notify.crud.base import CRUDBase
from campus_notify.models.exam import Exam, ExamAttempt
from campus_notify.schemas.exam import ExamAttemptGrade, ExamCreate

class CRUDExam(CRUDBase[Exam, ExamCreate, ExamCreate]):

    def publish(self, db: Session, *, exam: Exam) -> Exam:
        exam.published_at = datetime.utcnow()
        db.add(exam)
        db.flush()
        return exam

class CRUDExamAttempt(CRUDBase[ExamAttempt, ExamAttemptGrade, ExamAttemptGrade]):

    def get_in_progress(self, db: Session, *, exam_id: int, student_id: int) -> Optional[ExamAttempt]:
        return db.query(self.model).filter(
            self.model.exam_id == exam_id,
            self.model.student_id == student_id,
            self.model.status == ExamAttemptStatusEnum.IN_PROGRESS.value,
        ).first()

    def grade(self, db: Session, *, attempt: ExamAttempt, score: float) -> ExamAttempt:
        attempt.score = score
        attempt.status = ExamAttemptStatusEnum.GRADED.value
        attempt.graded_at = datetime.utcnow()
        db.add(attempt)
        db.flush()
        return attempt

exam = CRUDExam(Exam)
exam_attempt = CRUDExamAttempt(ExamAttempt)
