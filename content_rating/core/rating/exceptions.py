"""
Exceptions raised by the content rating engine.

Bad input (unknown rating text, unknown units, anonymous viewers) never raises;
these are reserved for infrastructure failures.
"""
from __future__ import annotations

from django.utils.translation import gettext as _


class ContentRatingError(Exception):
    """
    Base exception for content rating
    """

    def __init__(self, message: str = ""):
        super().__init__()
        self.message = message

    def __str__(self):
        return str(self.message)

    def __repr__(self):
        return f"{self.__class__.__name__}({str(self)})"


class StoreUnavailable(ContentRatingError):
    """
    The rating store could not be read or written.

    The original database error is chained as ``__cause__``.
    """

    def __init__(self, unit_id: int | None, operation: str):
        super().__init__()
        self.unit_id = unit_id
        self.operation = operation
        self.message = _(
            "Content rating store unavailable while trying to {operation} unit {unit_id}"
        ).format(operation=operation, unit_id=unit_id)
