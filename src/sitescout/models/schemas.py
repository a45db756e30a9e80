# src/sitescout/models/schemas.py
from typing import List, Literal, Optional, Dict, Any
from pydantic import BaseModel, Field, model_validator


# ===== Tool =====
class GetPowerDataArgs(BaseModel):
    location: Optional[str] = Field(None, description="장소 이름 (지오코딩 대상)")
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    start: Optional[str] = Field(None, description="YYYYMMDD")
    end: Optional[str] = Field(None, description="YYYYMMDD")


# ===== Request =====
class ChatTurn(BaseModel):
    role: Literal["user", "assistant"]
    text: str


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1)
    history: List[ChatTurn] = Field(default_factory=list)


class ClimateRequest(BaseModel):
    latitude: float
    longitude: float
    start: Optional[str] = Field(None, description="YYYYMMDD")
    end: Optional[str] = Field(None, description="YYYYMMDD")

    @model_validator(mode="after")
    def _validate_dates(self):
        for d in (self.start, self.end):
            if d is not None and (len(d) != 8 or not d.isdigit()):
                raise ValueError("dates must be YYYYMMDD")
        return self


# ===== Response =====
class ChatResponse(BaseModel):
    text: str = ""
    title: Optional[str] = None
    notes: List[str] = Field(default_factory=list)
    insight: Optional[Dict[str, Any]] = None
    card: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
