from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class GameIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    home: str = ""
    away: str = ""
    odd: Union[float, str, None] = 1.0
    over_under: Optional[str] = Field(default="", alias="overUnder")
    result: Optional[str] = "pending"


class SlipIn(BaseModel):
    date: Optional[str] = None
    games: List[GameIn] = Field(default_factory=list)
    access: Optional[str] = None
    type: Optional[str] = None
    premium: bool = False
    vip: bool = False


class AddSlipRequest(BaseModel):
    slip: SlipIn


class UpdateGameRequest(BaseModel):
    slip_id: str = Field(alias="slipId")
    game_index: int = Field(alias="gameIndex")
    result: Optional[str] = None
    over_under: Optional[str] = Field(default=None, alias="overUnder")


class SlipResultRequest(BaseModel):
    slip_id: str = Field(alias="slipId")
    game_index: int = Field(alias="gameIndex")
    result: str


class UpdateSlipTypeRequest(BaseModel):
    slip_id: str = Field(alias="slipId")
    type: str
