from .card import Card, RawCard, MIN_EASINESS_FACTOR, INITIAL_EASINESS_FACTOR
from .deck import Deck
from .review import ReviewButton, ReviewSubmission, ReviewResult

__all__ = [
    'Card', 'RawCard', 'MIN_EASINESS_FACTOR', 'INITIAL_EASINESS_FACTOR',
    'Deck', 'ReviewButton', 'ReviewSubmission', 'ReviewResult',
]
