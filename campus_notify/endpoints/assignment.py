from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from campus_notify.core.constants import UserTypeEnum
from campus_notify.schemas.response import APIResponse
from campus_notify.schemas.assignment import (
    Assignment,
    AssignmentCreate,
    AssignmentSubmission,
    SubmissionCreate,
    SubmissionGrade,
)
from campus_notify.schemas.user import Actor
from campus_notify.services.assignment import assignment_service
from campus_notify.utils import deps

router = APIRouter()

@router.post("/", response_model=APIResponse[Assignment], status_code=status.HTTP_201_CREATED)
async def create_assignment(
    assignment_in: AssignmentCreate,
    db: Session = Depends(deps.get_transactional_db),
    teacher: Actor = Depends(deps.require_user_type(UserTypeEnum.TEACHER)),
):
    data = assignment_service.create_assignment(db, assignment_in=assignment_in, teacher=teacher)
    return APIResponse(message="Assignment created successfully", data=data)

@router.post("/{assignment_id}/publish", response_model=APIResponse[Assignment])
async def publish_assignment(
    assignment_id: int,
    db: Session = Depends(deps.get_transactional_db),
    teacher: Actor = Depends(deps.require_user_type(UserTypeEnum.TEACHER)),
):
    """Publish an assignment and notify every active student of its group."""
    data = assignment_service.publish_assignment(db, assignment_id=assignment_id, teacher=teacher)
    return APIResponse(message="Assignment published successfully", data=data)

@router.post("/{assignment_id}/submissions", response_model=APIResponse[AssignmentSubmission], status_code=status.HTTP_201_CREATED)
async def submit_assignment(
    assignment_id: int,
    submission_in: SubmissionCreate,
    db: Session = Depends(deps.get_transactional_db),
    student: Actor = Depends(deps.require_user_type(UserTypeEnum.STUDENT)),
):
    data = assignment_service.submit(db, assignment_id=assignment_id, submission_in=submission_in, student=student)
    return APIResponse(message="Assignment submitted successfully", data=data)

@router.post("/submissions/{submission_id}/grade", response_model=APIResponse[AssignmentSubmission])
async def grade_submission(
    submission_id: int,
    grade_in: SubmissionGrade,
    db: Session = Depends(deps.get_transactional_db),
    teacher: Actor = Depends(deps.require_user_type(UserTypeEnum.TEACHER)),
):
    data = assignment_service.grade_submission(db, submission_id=submission_id, grade_in=grade_in, teacher=teacher)
    return APIResponse(message="Submission graded successfully", data=data)
