from typing import Optional

from pydantic import BaseModel


class RegisterRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
