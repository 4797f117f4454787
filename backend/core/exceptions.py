"""
Domain exceptions raised by services and mapped to HTTP statuses in main.
"""


class NotFoundError(Exception):
    """A resource does not exist or belongs to another user (404)."""
    pass


class InsufficientCreditsError(Exception):
    """The user has fewer credits than the operation costs (403)."""
    pass
