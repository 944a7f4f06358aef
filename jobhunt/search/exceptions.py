"""Search service exceptions."""


class InvalidQueryError(ValueError):
    """Raised when a search query is empty or whitespace-only."""
