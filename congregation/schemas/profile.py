from pydantic import BaseModel
from typing import Optional


class Profile(BaseModel):
    id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @property
    def full_name(self) -> Optional[str]:
        """'First Last' with blanks dropped, or None when both names are empty."""
        name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return name or None


class ProfileUpdate(BaseModel):
    first_name: str
    last_name: str
