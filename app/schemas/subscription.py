from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class SubscriptionRequestIn(BaseModel):
    email: str
    plan: str
    contact: Optional[str] = None
    message: Optional[str] = None


class ApproveRequestIn(BaseModel):
    request_id: str = Field(alias="requestId")
