from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from combat.model import Class, Element

class Direction(str, Enum):
    """Which side sent the bytes being inspected."""
    SERVER = "server"
    CLIENT = "client"

class DecodeRequest(BaseModel):
    """Captured bytes to decode, hex encoded."""
    hex: str
    size_limit: Optional[int] = Field(default=None, gt=0)

class DecodeResponse(BaseModel):
    packet: dict
    consumed: int

class SmallStringIn(BaseModel):
    text: str

class HexIn(BaseModel):
    hex: str

class UnitViewIn(BaseModel):
    """Partially known unit; omitted fields are unknown."""
    unit_class: Optional[Class] = None
    element: Optional[Element] = None
    frac_hp: Optional[float] = Field(default=None, ge=0.0, le=1.0)

class UnitViewStats(BaseModel):
    max_hp: float
    hp: float
    damage: float
