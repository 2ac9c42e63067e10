"""
Settings for the content rating app.

Everything lives in one ``CONTENT_RATING`` dict in the Django settings; any key
left out falls back to ``DEFAULTS``.
"""
from __future__ import annotations

from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    # Canonical rating code -> accepted aliases. Order here is the order in
    # which codes are resolved during redaction.
    "ALIASES": {
        "R15": ["R15", "R-15", "R 15", "15"],
        "R18": ["R18", "R-18", "R 18", "18"],
        "R18G": ["R18G", "R-18G", "R 18G", "18G"],
    },
    # File name of the image shown instead of a rated file the viewer may not see.
    "WARNING_IMAGE": "",
    # Raise StoreUnavailable on failed reads instead of treating them as unrated.
    "STRICT_STORE_ERRORS": False,
    # Remove the text of unbalanced marker tokens left after redaction.
    "STRIP_UNBALANCED_MARKERS": False,
    # Dotted path of the UnitResolver class used for title/file references.
    "RESOLVER": None,
}


def get_setting(name: str) -> Any:
    """
    Return the configured value of ``CONTENT_RATING[name]``, or its default.
    """
    configured = getattr(settings, "CONTENT_RATING", None) or {}
    if name in configured:
        return configured[name]
    return DEFAULTS[name]
