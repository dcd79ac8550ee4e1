from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import date
from uuid import uuid4

MIN_EASINESS_FACTOR = 1.3
INITIAL_EASINESS_FACTOR = 2.5

def new_card_id() -> str:
    return str(uuid4())

class CardBase(BaseModel):
    question: str
    answer: str
    keyword: Optional[str] = None
    image: Optional[str] = None

class RawCard(CardBase):
    """Card content as produced by a generation collaborator."""

    @field_validator("question", "answer")
    @classmethod
    def require_text(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

class Card(CardBase):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: str = Field(default_factory=new_card_id)
    easiness_factor: float = Field(
        INITIAL_EASINESS_FACTOR,
        ge=MIN_EASINESS_FACTOR,
        validation_alias=AliasChoices("easiness_factor", "ef"),
    )
    repetitions: int = Field(0, ge=0)
    interval_days: int = Field(
        0,
        ge=0,
        validation_alias=AliasChoices("interval_days", "interval"),
    )
    due_date: date = Field(
        default_factory=date.today,
        validation_alias=AliasChoices("due_date", "due"),
    )
    point: int = 0
