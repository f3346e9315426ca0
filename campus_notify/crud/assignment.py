from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from campus_notify.core.constants import SubmissionStatusEnum
from campus_notify.crud.base import CRUDBase
from campus_notify.models.assignment import Assignment, AssignmentSubmission
from campus_notify.schemas.assignment import AssignmentCreate, SubmissionCreate, SubmissionGrade

class CRUDAssignment(CRUDBase[Assignment, AssignmentCreate, AssignmentCreate]):

    def publish(self, db: Session, *, assignment: Assignment) -> Assignment:
        assignment.published_at = datetime.utcnow()
        db.add(assignment)
        db.flush()
        return assignment

class CRUDSubmission(CRUDBase[AssignmentSubmission, SubmissionCreate, SubmissionGrade]):

    def get_by_student(self, db: Session, *, assignment_id: int, student_id: int) -> Optional[AssignmentSubmission]:
        return db.query(self.model).filter(
            self.model.assignment_id == assignment_id,
            self.model.student_id == student_id,
        ).first()

    def grade(self, db: Session, *, submission: AssignmentSubmission, score: float, feedback: Optional[str]) -> AssignmentSubmission:
        submission.score = score
        submission.feedback = feedback
        submission.status = SubmissionStatusEnum.GRADED.value
        submission.graded_at = datetime.utcnow()
        db.add(submission)
        db.flush()
        return submission

assignment = CRUDAssignment(Assignment)
submission = CRUDSubmission(AssignmentSubmission)
