"""
SQLAlchemy models for TipStorm.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(Text, nullable=False, unique=True, index=True)
    password_hash = Column(Text, nullable=False)
    role = Column(Text, nullable=False, default="user")
    premium = Column(Boolean, nullable=False, default=False)
    approved = Column(Boolean, nullable=False, default=False)
    plan = Column(Text, nullable=False, default="free")
    expires_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(), onupdate=_utcnow
    )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class Slip(Base):
    __tablename__ = "slips"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    date = Column(Text, nullable=False, index=True)
    access = Column(Text, nullable=False, default="free")
    total = Column(Float, nullable=False, default=1.0)
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now())

    games = relationship(
        "Game",
        back_populates="slip",
        order_by="Game.position",
        cascade="all, delete-orphan",
    )


class Game(Base):
    __tablename__ = "games"

    id = Column(Integer, primary_key=True, autoincrement=True)
    slip_id = Column(Uuid(as_uuid=True), ForeignKey("slips.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    home = Column(Text, nullable=False, default="")
    away = Column(Text, nullable=False, default="")
    odd = Column(Float, nullable=False, default=1.0)
    over_under = Column(Text, nullable=False, default="")
    result = Column(Text, nullable=False, default="pending")

    slip = relationship("Slip", back_populates="games")


class SubscriptionRequest(Base):
    __tablename__ = "subscription_requests"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(Text, nullable=False, index=True)
    plan = Column(Text, nullable=False)
    amount = Column(Integer)
    contact = Column(Text)
    message = Column(Text)
    status = Column(Text, nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now())
    approved_at = Column(DateTime(timezone=True))
