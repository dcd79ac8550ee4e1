"""Turn generated card content into fully initialised decks."""
import logging
from datetime import date
from typing import Any, Dict, Optional, Sequence, Union

from pydantic import ValidationError

from models.card import Card, RawCard, INITIAL_EASINESS_FACTOR
from models.deck import Deck
from models.errors import DeckAssemblyError

logger = logging.getLogger(__name__)

RawCardInput = Union[RawCard, Dict[str, Any]]

def _coerce_raw_card(index: int, raw: RawCardInput) -> RawCard:
    if isinstance(raw, RawCard):
        return raw
    try:
        return RawCard.model_validate(raw)
    except ValidationError as exc:
        fields = ", ".join(str(err["loc"][0]) for err in exc.errors() if err.get("loc"))
        raise DeckAssemblyError(f"Raw card {index} is malformed ({fields or 'invalid shape'})") from exc

def new_card(raw: RawCard, today: Optional[date] = None) -> Card:
    """Mint a card with a fresh id and default scheduling state."""
    return Card(
        question=raw.question,
        answer=raw.answer,
        keyword=raw.keyword,
        image=raw.image,
        easiness_factor=INITIAL_EASINESS_FACTOR,
        repetitions=0,
        interval_days=0,
        due_date=today or date.today(),
        point=0,
    )

def assemble_deck(
    name: str,
    description: str,
    raw_cards: Sequence[RawCardInput],
    summary: Optional[str] = None,
    today: Optional[date] = None,
) -> Deck:
    """Build an unsaved deck whose cards are all due immediately."""
    if not name or not name.strip():
        raise DeckAssemblyError("Deck name is required")
    if not isinstance(raw_cards, (list, tuple)):
        raise DeckAssemblyError(f"Raw cards must be a list, got {type(raw_cards).__name__}")
    anchor = today or date.today()
    validated = [_coerce_raw_card(i, raw) for i, raw in enumerate(raw_cards)]
    cards = [new_card(raw, anchor) for raw in validated]
    if not cards:
        logger.warning("Deck %r assembled with no cards", name.strip())
    return Deck(
        name=name.strip(),
        description=description or "",
        studied=False,
        total=len(cards),
        learned=0,
        due=len(cards),
        summary=summary,
        created_at=anchor,
        cards=cards,
    )
