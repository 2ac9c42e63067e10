"""
Marker emission for the first rendering pass.

Two kinds of markers are spliced into rendered output:

* Block markers wrap an arbitrary region of a page between
  ``<rating-start-r18></rating-start-r18>`` and
  ``<rating-end-r18></rating-end-r18>``. They come from the paired
  ``<rating start="..."/>`` / ``<rating end="..."/>`` tag.
* Inline markers wrap a single rendered media transclusion between
  ``<!--cr-r18-`` and ``-r18-cr-->``. They come from the rating of the media
  file itself.

Codes inside markers are always lower case. Markers never outlive the
rendering of one page: the redactor consumes them.
"""
from __future__ import annotations

import logging
from typing import Any, MutableMapping

from .aliases import AliasTable
from .data import RatingCode
from .models import CONTENT_RATING_PROPERTY
from .store import RatingStore, is_valid_unit_id

log = logging.getLogger(__name__)


def block_start(code: RatingCode) -> str:
    code = code.lower()
    return f"<rating-start-{code}></rating-start-{code}>"


def block_end(code: RatingCode) -> str:
    code = code.lower()
    return f"<rating-end-{code}></rating-end-{code}>"


def inline_prefix(code: RatingCode) -> str:
    return f"<!--cr-{code.lower()}-"


def inline_suffix(code: RatingCode) -> str:
    return f"-{code.lower()}-cr-->"


class MarkerEmitter:
    """
    First-pass hooks: rating directives and marker tokens.
    """

    def __init__(self, aliases: AliasTable, store: RatingStore):
        self.aliases = aliases
        self.store = store

    def emit_directive(
        self,
        raw_text: str | None,
        unit_id: int | None,
        properties: MutableMapping[str, Any] | None = None,
    ) -> str:
        """
        Handle a ``{{#rating: ...}}`` directive on the unit being rendered.

        The text is classified; a recognised rating is stored for the unit and
        anything else removes the unit's rating. If the rendered artifact's
        property bag is passed in, the rating is recorded there as well.
        Returns the canonical code, or "" when the text was not a rating.
        """
        code = self.aliases.classify(raw_text)

        if properties is not None:
            if code:
                properties[CONTENT_RATING_PROPERTY] = code
            else:
                properties.pop(CONTENT_RATING_PROPERTY, None)

        if is_valid_unit_id(unit_id):
            if code:
                self.store.set_rating(unit_id, code)
            else:
                self.store.clear_rating(unit_id)
        else:
            # e.g. previewing a page that has not been saved yet
            log.debug(f"Rating directive {raw_text!r} on unit without identity; not persisted")

        return code or ""

    def emit_block_markers(self, start_raw: str | None = None, end_raw: str | None = None) -> str:
        """
        Marker text for the paired region tag.

        Each side is classified on its own and only resolvable sides produce a
        marker. The end marker always comes first, so that a single tag can
        close one region and open the next.
        """
        start_code = self.aliases.classify(start_raw)
        end_code = self.aliases.classify(end_raw)
        return (block_end(end_code) if end_code else "") + (block_start(start_code) if start_code else "")

    def render_tag(self, params: dict[str, str]) -> str:
        """
        Render the region tag from its attribute dict (``start=``, ``end=``).
        """
        return self.emit_block_markers(params.get("start"), params.get("end"))

    def emit_inline_markers(self, unit_id: int | None) -> tuple[str, str]:
        """
        Prefix and suffix to wrap around one rendered media transclusion.

        Both are empty when the media unit is unrated.
        """
        code = self.store.get_rating(unit_id)
        if not code:
            return "", ""
        return inline_prefix(code), inline_suffix(code)

    def wrap_inline(self, unit_id: int | None, html: str) -> str:
        prefix, suffix = self.emit_inline_markers(unit_id)
        return f"{prefix}{html}{suffix}"

    def apply_frame_params(self, unit_id: int | None, frame_params: dict[str, Any]) -> dict[str, Any]:
        """
        Set ``prefix``/``postfix`` on an image's frame parameters, for image
        renderers that splice those around their own output.
        """
        prefix, suffix = self.emit_inline_markers(unit_id)
        if prefix:
            frame_params["prefix"] = prefix
            frame_params["postfix"] = suffix
        return frame_params
