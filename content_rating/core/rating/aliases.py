"""
Rating alias table and classifier.

Authors write ratings however they like ("R-18", "r 18", "18"). The alias table
maps each canonical rating code to the free-text aliases it accepts, and
classification turns author text back into the canonical code.
"""
from __future__ import annotations

import logging
from typing import Iterable, Mapping

from django.core.exceptions import ImproperlyConfigured
from django.utils.functional import cached_property

from .data import MaybeRating, RatingCode

log = logging.getLogger(__name__)


def _split_aliases(aliases: str | Iterable[str]) -> list[str]:
    """
    Accept either a list of aliases or a comma separated string of them.
    """
    if isinstance(aliases, str):
        aliases = aliases.split(",")
    return [alias.strip() for alias in aliases if alias and alias.strip()]


class AliasTable:
    """
    Fixed mapping from canonical rating code to its accepted aliases.

    The table is static configuration: it is built once, usually from the
    ``CONTENT_RATING["ALIASES"]`` setting, and never changes afterwards. The
    reverse (alias -> code) index is only built the first time something is
    classified.
    """

    def __init__(self, aliases: Mapping[str, str | Iterable[str]]):
        self._aliases: dict[RatingCode, tuple[str, ...]] = {}
        for code, code_aliases in aliases.items():
            code = code.strip().upper()
            if not code:
                raise ImproperlyConfigured("Content rating codes cannot be empty.")
            if not code.isalnum():
                raise ImproperlyConfigured(
                    f"Content rating code {code!r} may only contain letters and digits."
                )
            names = _split_aliases(code_aliases)
            # The code itself is always an accepted spelling.
            if code not in (name.upper() for name in names):
                names.insert(0, code)
            self._aliases[code] = tuple(names)

    def __repr__(self):
        return f"<{self.__class__.__name__}> {', '.join(self.codes)}"

    def __contains__(self, code) -> bool:
        return isinstance(code, str) and code.upper() in self._aliases

    def __iter__(self):
        return iter(self._aliases)

    def __len__(self):
        return len(self._aliases)

    @property
    def codes(self) -> tuple[RatingCode, ...]:
        """
        Every known rating code, in configured order.
        """
        return tuple(self._aliases)

    def aliases_for(self, code: str) -> tuple[str, ...]:
        return self._aliases.get(code.upper(), ())

    @cached_property
    def _index(self) -> dict[str, RatingCode]:
        """
        Upper-cased alias -> rating code.
        """
        index: dict[str, RatingCode] = {}
        for code, names in self._aliases.items():
            for name in names:
                key = name.upper()
                owner = index.setdefault(key, code)
                if owner != code:
                    raise ImproperlyConfigured(
                        f"Content rating alias {name!r} is configured for both {owner} and {code}."
                    )
        log.debug(f"Built content rating alias index with {len(index)} aliases")
        return index

    def classify(self, text: str | None) -> MaybeRating:
        """
        Normalize free text to a canonical rating code.

        Surrounding whitespace is ignored and comparison is case-insensitive,
        but otherwise the text has to be exactly one of the aliases. Anything
        else (including empty text) is simply unrated and returns None.
        """
        if text is None:
            return None
        text = text.strip()
        if not text:
            return None
        return self._index.get(text.upper())

    def validate(self) -> None:
        """
        Build the reverse index now, so configuration errors surface at startup.
        """
        self._index  # pylint: disable=pointless-statement
