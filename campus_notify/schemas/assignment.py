from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional

class AssignmentCreate(BaseModel):
    group_id: int
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    deadline: datetime
    max_score: float = Field(100, gt=0)
    publish_immediately: bool = False

class Assignment(BaseModel):
    id: int
    teacher_id: int
    group_id: int
    title: str
    description: Optional[str] = None
    deadline: datetime
    max_score: float
    published_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class SubmissionCreate(BaseModel):
    content: Optional[str] = None

class SubmissionGrade(BaseModel):
    score: float = Field(..., ge=0)
    feedback: Optional[str] = None

class AssignmentSubmission(BaseModel):
    id: int
    assignment_id: int
    student_id: int
    content: Optional[str] = None
    score: Optional[float] = None
    feedback: Optional[str] = None
    status: str
    submitted_at: datetime
    graded_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
