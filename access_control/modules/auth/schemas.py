from pydantic import BaseModel, ConfigDict
from typing import Optional, List


class Principal(BaseModel):
    """Authenticated identity; owned by the session subsystem and never mutated here."""
    id: str
    email: str
    name: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class MeResponse(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    roles: List[str]
    is_admin: bool
