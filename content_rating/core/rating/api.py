"""
Content Rating API

Renderers and other host code should call these functions instead of touching
the models or the engine's parts directly: they always go through the engine
built at startup, so the rating cache stays consistent with what is written.

No permissions/rules are enforced by these methods; viewer eligibility is
passed in by the caller (see ``preferences.viewer_for_user``).
"""
from __future__ import annotations

from typing import Any, MutableMapping

from django.apps import apps

from .data import ByUnitId, MaybeRating, UnitRef, Viewer, ViewerPermissions
from .engine import ContentRatingEngine

__all__ = [
    "get_engine",
    "classify",
    "get_rating",
    "get_rating_for",
    "set_rating",
    "clear_rating",
    "emit_directive",
    "emit_block_markers",
    "emit_inline_markers",
    "redact",
    "is_allowed",
]


def get_engine() -> ContentRatingEngine:
    """
    Return the engine built when the content rating app became ready.
    """
    return apps.get_app_config("cr_rating").engine


def classify(text: str | None) -> MaybeRating:
    """
    Normalize free text ("r-18", " 18 ") to a rating code, or None.
    """
    return get_engine().aliases.classify(text)


def get_rating(unit_id: int | None) -> MaybeRating:
    return get_engine().store.get_rating(unit_id)


def get_rating_for(ref: UnitRef) -> MaybeRating:
    """
    Rating of a unit given by id, title text or file handle.
    """
    return get_engine().store.get_rating_for(ref)


def set_rating(unit_id: int, code: MaybeRating) -> None:
    get_engine().store.set_rating(unit_id, code)


def clear_rating(unit_id: int) -> None:
    get_engine().store.clear_rating(unit_id)


def emit_directive(
    raw_text: str | None,
    unit_id: int | None,
    properties: MutableMapping[str, Any] | None = None,
) -> str:
    """
    Handle a rating directive for the unit being rendered; returns the code or "".
    """
    return get_engine().markers.emit_directive(raw_text, unit_id, properties)


def emit_block_markers(start_raw: str | None = None, end_raw: str | None = None) -> str:
    return get_engine().markers.emit_block_markers(start_raw, end_raw)


def emit_inline_markers(unit_id: int | None) -> tuple[str, str]:
    return get_engine().markers.emit_inline_markers(unit_id)


def redact(full_text: str, permissions: ViewerPermissions | None, eligible: bool) -> str:
    """
    Remove or unwrap every marked region of a fully rendered document.
    """
    return get_engine().redactor.redact(full_text, permissions, eligible)


def is_allowed(unit_id: int | UnitRef | None, viewer: Viewer | ViewerPermissions | None) -> bool:
    """
    Whether a single media unit may be shown to the viewer.
    """
    ref = ByUnitId(unit_id) if isinstance(unit_id, int) or unit_id is None else unit_id
    return get_engine().gate.is_ref_allowed(ref, viewer)
