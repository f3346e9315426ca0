import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from campus_notify.crud.assignment import assignment as crud_assignment
from campus_notify.crud.assignment import submission as crud_submission
from campus_notify.crud.user import group as crud_group
from campus_notify.models.assignment import Assignment, AssignmentSubmission
from campus_notify.schemas.assignment import AssignmentCreate, SubmissionCreate, SubmissionGrade
from campus_notify.schemas.user import Actor
from campus_notify.services.notification import notification_service

logger = logging.getLogger(__name__)

class AssignmentService:

    def _get_owned_assignment(self, db: Session, *, assignment_id: int, teacher: Actor) -> Assignment:
        assignment = crud_assignment.get(db, id=assignment_id)
        if not assignment:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assignment not found.")
        if assignment.teacher_id != teacher.user_id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You do not own this assignment.")
        return assignment

    def create_assignment(self, db: Session, *, assignment_in: AssignmentCreate, teacher: Actor) -> Assignment:
        if not crud_group.get(db, id=assignment_in.group_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Group not found.")
        assignment = crud_assignment.create(
            db, obj_in={**assignment_in.model_dump(exclude={"publish_immediately"}), "teacher_id": teacher.user_id}
        )
        if assignment_in.publish_immediately:
            self._publish(db, assignment=assignment)
        return assignment

    def _publish(self, db: Session, *, assignment: Assignment) -> Assignment:
        crud_assignment.publish(db, assignment=assignment)
        notification_service.notify_new_assignment(db, assignment=assignment)
        logger.info(f"Assignment {assignment.id} published to group {assignment.group_id}")
        return assignment

    def publish_assignment(self, db: Session, *, assignment_id: int, teacher: Actor) -> Assignment:
        """Publish once; the group is notified on the first publish only."""
        assignment = self._get_owned_assignment(db, assignment_id=assignment_id, teacher=teacher)
        if assignment.published_at is not None:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Assignment is already published.")
        return self._publish(db, assignment=assignment)

    def submit(self, db: Session, *, assignment_id: int, submission_in: SubmissionCreate, student: Actor) -> AssignmentSubmission:
        assignment = crud_assignment.get(db, id=assignment_id)
        if not assignment or assignment.published_at is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assignment not found.")
        if crud_submission.get_by_student(db, assignment_id=assignment.id, student_id=student.user_id):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Assignment already submitted.")
        return crud_submission.create(
            db,
            obj_in={"assignment_id": assignment.id, "student_id": student.user_id, "content": submission_in.content},
        )

    def grade_submission(self, db: Session, *, submission_id: int, grade_in: SubmissionGrade, teacher: Actor) -> AssignmentSubmission:
        submission = crud_submission.get(db, id=submission_id)
        if not submission:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found.")
        assignment = self._get_owned_assignment(db, assignment_id=submission.assignment_id, teacher=teacher)
        if grade_in.score > assignment.max_score:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Score cannot exceed {assignment.max_score:g}.",
            )
        crud_submission.grade(db, submission=submission, score=grade_in.score, feedback=grade_in.feedback)
        notification_service.notify_assignment_graded(db, submission=submission)
        return submission

assignment_service = AssignmentService()
