class RecallKitError(Exception):
    """Base class for errors surfaced to callers."""


class ReviewValidationError(RecallKitError, ValueError):
    pass


class DeckAssemblyError(RecallKitError, ValueError):
    pass


class CardGenerationError(RecallKitError):
    pass


class StoreError(RecallKitError):
    pass


class StoreWriteError(StoreError):
    pass


class StoreLockTimeout(StoreError):
    pass


class DeckNotFound(RecallKitError, LookupError):
    def __init__(self, deck_id: str):
        super().__init__(f"Deck not found: {deck_id}")
        self.deck_id = deck_id


class CardNotFound(RecallKitError, LookupError):
    def __init__(self, deck_id: str, card_id: str):
        super().__init__(f"Card not found: {card_id} (deck {deck_id})")
        self.deck_id = deck_id
        self.card_id = card_id
