"""
Media gate: visibility of single media items for a viewer.

Where ``redaction`` works on rendered text, the gate answers the yes/no
question for one media unit at the places where the host displays, lists or
picks media: the file description page, galleries, file lists and automatic
thumbnail selection.
"""
from __future__ import annotations

from typing import Any, Callable, Iterable, TypeVar

from django.core.exceptions import ImproperlyConfigured

from .data import UnitRef, Viewer, ViewerPermissions
from .store import RatingStore

T = TypeVar("T")

# Subtracted from the score of a thumbnail candidate the viewer may not see.
DISALLOWED_SCORE_PENALTY = 1000


def _as_viewer(viewer: Viewer | ViewerPermissions | None) -> Viewer:
    """
    Accept a Viewer, or a bare permission mapping (which implies an eligible
    viewer holding those preferences).
    """
    if isinstance(viewer, Viewer):
        return viewer
    if viewer is None:
        return Viewer.anonymous()
    return Viewer(eligible=True, permissions=viewer)


class MediaGate:
    """
    Per-item visibility checks against the rating store.
    """

    def __init__(self, store: RatingStore, placeholder: str = ""):
        self.store = store
        self.placeholder = placeholder

    def is_allowed(self, unit_id: int | None, viewer: Viewer | ViewerPermissions | None) -> bool:
        """
        Unrated (or unknown) units are always allowed; rated ones only if the
        viewer opted in to that rating.
        """
        return _as_viewer(viewer).allows(self.store.get_rating(unit_id))

    def is_ref_allowed(self, ref: UnitRef, viewer: Viewer | ViewerPermissions | None) -> bool:
        return self.is_allowed(self.store.resolve(ref), viewer)

    def display_file(self, ref: UnitRef, viewer: Viewer | ViewerPermissions | None, file: Any) -> Any:
        """
        The file to show on a media page: ``file`` itself, or the name of the
        configured warning image when the viewer may not see it.
        """
        if self.is_ref_allowed(ref, viewer):
            return file
        if not self.placeholder:
            raise ImproperlyConfigured(
                'CONTENT_RATING["WARNING_IMAGE"] must be set to hide rated media files.'
            )
        return self.placeholder

    def filter_entries(
        self,
        entries: Iterable[T],
        viewer: Viewer | ViewerPermissions | None,
        key: Callable[[T], int | None] | None = None,
    ) -> list[T]:
        """
        Drop the entries (gallery images, list rows) the viewer may not see.

        ``key`` extracts the unit id from an entry; by default entries are unit
        ids themselves.
        """
        entries = list(entries)
        get_id = key or (lambda entry: entry)
        self.store.prefetch(get_id(entry) for entry in entries)
        viewer = _as_viewer(viewer)
        return [entry for entry in entries if viewer.allows(self.store.get_rating(get_id(entry)))]

    # Galleries and file lists are filtered the same way.
    filter_gallery = filter_entries
    filter_list = filter_entries

    def score_candidate(
        self,
        score: float,
        unit_id: int | None,
        viewer: Viewer | ViewerPermissions | None,
    ) -> float:
        """
        Adjust an automatic thumbnail candidate's score.

        Candidates the viewer may not see stay in the running but are pushed
        far down, so selection logic never has to special-case them.
        """
        if self.is_allowed(unit_id, viewer):
            return score
        return score - DISALLOWED_SCORE_PENALTY

