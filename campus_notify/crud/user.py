from typing import List, Optional

from pydantic import BaseModel
from sqlalchemy.orm import Session

from campus_notify.core.constants import UserTypeEnum
from campus_notify.crud.base import CRUDBase
from campus_notify.models.user import Admin, Group, Student, Teacher

class CRUDStudent(CRUDBase[Student, BaseModel, BaseModel]):
    def get_active_by_group(self, db: Session, *, group_id: int) -> List[Student]:
        return (
            db.query(self.model)
            .filter(self.model.group_id == group_id, self.model.is_active == True)
            .order_by(self.model.id)
            .all()
        )

student = CRUDStudent(Student)
teacher = CRUDBase(Teacher)
admin = CRUDBase(Admin)
group = CRUDBase(Group)

_ACCOUNTS = {
    UserTypeEnum.STUDENT.value: student,
    UserTypeEnum.TEACHER.value: teacher,
    UserTypeEnum.ADMIN.value: admin,
}

def get_account(db: Session, *, user_id: int, user_type: str) -> Optional[object]:
    """Look up the account row behind an (id, kind) pair."""
    crud = _ACCOUNTS.get(user_type)
    if crud is None:
        return None
    return crud.get(db, id=user_id)
