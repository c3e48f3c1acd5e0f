from typing import Optional
from pydantic import BaseModel, Field

class StartRequest(BaseModel):
    """Battle start request schema."""
    seed: int = 42
    speed_ms: int = Field(default=700, ge=0, le=5000)
    start_delay_ms: int = Field(default=1500, ge=0)

class SpeedRequest(BaseModel):
    """Explicit pacing; omit speed_ms to cycle through the presets."""
    speed_ms: Optional[int] = Field(default=None, ge=0, le=5000)

class SpeedResponse(BaseModel):
    speed_ms: int
    preset: str

class EventsResponse(BaseModel):
    """Events response schema."""
    next_offset: int
    events: list[dict]
