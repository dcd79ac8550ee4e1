# Handlers package __init__.py - re-exports the operations main.py drives
from .decks import create_deck, delete_deck, generate_deck, get_deck, list_decks, mark_studied
from .review import next_card, submit_button, submit_review, validate_submission

__all__ = [
    'create_deck', 'delete_deck', 'generate_deck', 'get_deck', 'list_decks', 'mark_studied',
    'next_card', 'submit_button', 'submit_review', 'validate_submission',
]
