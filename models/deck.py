from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import date
from uuid import uuid4

from .card import Card

class DeckBase(BaseModel):
    name: str
    description: str = ""

class Deck(DeckBase):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    studied: bool = False
    total: int = Field(0, ge=0)
    learned: int = Field(0, ge=0)
    due: int = Field(0, ge=0)
    summary: Optional[str] = None
    created_at: Optional[date] = None
    cards: List[Card] = Field(default_factory=list)
