from pydantic import BaseModel
from uuid import UUID


class UserResponse(BaseModel):
    id: UUID
    name: str
    email: str
    is_active: bool

    model_config = {"from_attributes": True}
