from pydantic import BaseModel
from typing import List


class RoleAssign(BaseModel):
    role_name: str


class UserRolesResponse(BaseModel):
    user_id: str
    roles: List[str]


class RoleAssignResponse(BaseModel):
    user_id: str
    role_name: str
    assigned: bool
    message: str
