from pydantic import BaseModel, Field
from enum import Enum

from .card import Card

class ReviewButton(str, Enum):
    FORGOT = "forgot"
    HARD = "hard"
    EASY = "easy"

class ReviewSubmission(BaseModel):
    deck_id: str
    card_id: str
    quality: int = Field(..., ge=0, le=5, strict=True)

class ReviewResult(BaseModel):
    deck_id: str
    card: Card
    quality: int
    success: bool
