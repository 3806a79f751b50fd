from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ActivateRequest(BaseModel):
    user_email: str = Field(alias="userEmail")
    plan: Optional[str] = None


class ApproveUserRequest(BaseModel):
    user_email: str = Field(alias="userEmail")
