from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional

class ExamCreate(BaseModel):
    group_id: int
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    publish_immediately: bool = False

class Exam(BaseModel):
    id: int
    teacher_id: int
    group_id: int
    title: str
    description: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    published_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

class ExamAttemptGrade(BaseModel):
    score: float = Field(..., ge=0, le=100)

class ExamAttempt(BaseModel):
    id: int
    exam_id: int
    student_id: int
    score: Optional[float] = None
    status: str
    started_at: datetime
    graded_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
