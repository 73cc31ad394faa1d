"""Exceptions raised by the content model."""


class ContentError(Exception):
    """Base class for content-tree errors."""


class ItemNotFoundError(ContentError):
    """Raised when an operation references an id that is not in the tree."""

    def __init__(self, item_id: str) -> None:
        super().__init__(f"No content item with id '{item_id}'")
        self.item_id = item_id


class InvalidContentError(ContentError):
    """Raised when a document or item does not have the expected shape."""


class TreeIntegrityError(ContentError):
    """Raised when a mutation would leave the tree cyclic or ambiguous."""
