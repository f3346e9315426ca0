from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from campus_notify.core.constants import UserTypeEnum
from campus_notify.schemas.response import APIResponse
from campus_notify.schemas.exam import Exam, ExamAttempt, ExamAttemptGrade, ExamCreate
from campus_notify.schemas.user import Actor
from campus_notify.services.exam import exam_service
from campus_notify.utils import deps

router = APIRouter()

@router.post("/", response_model=APIResponse[Exam], status_code=status.HTTP_201_CREATED)
async def create_exam(
    exam_in: ExamCreate,
    db: Session = Depends(deps.get_transactional_db),
    teacher: Actor = Depends(deps.require_user_type(UserTypeEnum.TEACHER)),
):
    data = exam_service.create_exam(db, exam_in=exam_in, teacher=teacher)
    return APIResponse(message="Test created successfully", data=data)

@router.post("/{exam_id}/publish", response_model=APIResponse[Exam])
async def publish_exam(
    exam_id: int,
    db: Session = Depends(deps.get_transactional_db),
    teacher: Actor = Depends(deps.require_user_type(UserTypeEnum.TEACHER)),
):
    """Publish a test and notify every active student of its group."""
    data = exam_service.publish_exam(db, exam_id=exam_id, teacher=teacher)
    return APIResponse(message="Test published successfully", data=data)

@router.post("/{exam_id}/attempts", response_model=APIResponse[ExamAttempt], status_code=status.HTTP_201_CREATED)
async def start_attempt(
    exam_id: int,
    db: Session = Depends(deps.get_transactional_db),
    student: Actor = Depends(deps.require_user_type(UserTypeEnum.STUDENT)),
):
    data = exam_service.start_attempt(db, exam_id=exam_id, student=student)
    return APIResponse(message="Attempt started", data=data)

@router.post("/attempts/{attempt_id}/grade", response_model=APIResponse[ExamAttempt])
async def grade_attempt(
    attempt_id: int,
    grade_in: ExamAttemptGrade,
    db: Session = Depends(deps.get_transactional_db),
    teacher: Actor = Depends(deps.require_user_type(UserTypeEnum.TEACHER)),
):
    data = exam_service.grade_attempt(db, attempt_id=attempt_id, grade_in=grade_in, teacher=teacher)
    return APIResponse(message="Attempt graded successfully", data=data)
