from pydantic import BaseModel
from typing import Optional


class Identity(BaseModel):
    """Identity snapshot as issued by the provider: name, email, image."""
    name: Optional[str] = None
    email: str
    image: Optional[str] = None


class TokenData(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    image: Optional[str] = None


class SessionResponse(BaseModel):
    user: Optional[Identity] = None
