from pydantic import BaseModel
from typing import Optional, List


class AccessCheckResponse(BaseModel):
    is_admin: bool
    roles: List[str]


class RoleSummary(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
