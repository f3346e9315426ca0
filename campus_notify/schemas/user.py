from pydantic import BaseModel, ConfigDict

from campus_notify.core.constants import UserTypeEnum

class Actor(BaseModel):
    """A (user_id, user_type) pair: the authenticated caller or a fan-out recipient."""
    user_id: int
    user_type: UserTypeEnum

    model_config = ConfigDict(use_enum_values=True, frozen=True)
