"""
Rating store: the persisted rating of each content unit, with a read-through
process-local cache in front of it.

Reads are cheap and frequent (every embedded image on every page asks for its
rating) while writes only happen when a page is saved, so every read result is
cached, including "unrated", and every write updates the cache immediately.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable

from django.db import DatabaseError
from django.utils.module_loading import import_string

from content_rating.lib.cache import MISSING, ProcessCache

from .data import ByFileHandle, ByTitleText, ByUnitId, MaybeRating, UnitRef
from .exceptions import StoreUnavailable
from .models import CONTENT_RATING_PROPERTY, PageProp

log = logging.getLogger(__name__)


def is_valid_unit_id(unit_id: Any) -> bool:
    """
    Unit identities are positive integers; 0 is "does not exist".
    """
    return isinstance(unit_id, int) and not isinstance(unit_id, bool) and unit_id > 0


class UnitResolver:
    """
    Turns title text and file handles into content unit identities.

    Resolution belongs to the host application (it owns titles, namespaces and
    files), so this default only understands file handles that carry a
    ``unit_id`` attribute, and resolves no titles at all. Hosts subclass it and
    point ``CONTENT_RATING["RESOLVER"]`` at their class.
    """

    def resolve_title(self, text: str) -> int | None:  # pylint: disable=unused-argument
        return None

    def resolve_file(self, file: Any) -> int | None:
        return getattr(file, "unit_id", None)


def load_resolver(path: str | None) -> UnitResolver:
    """
    Instantiate the resolver class at the given dotted path, or the default.
    """
    if not path:
        return UnitResolver()
    return import_string(path)()


class RatingStore:
    """
    Cache-aside key/value store of unit id -> rating code.

    The cache has no eviction: it holds one entry per unit touched by this
    process, and is dropped with ``clear_cache()``.
    """

    def __init__(self, resolver: UnitResolver | None = None, strict: bool = False):
        self.resolver = resolver or UnitResolver()
        self.strict = strict
        self._cache = ProcessCache("content-rating")

    def __repr__(self):
        return f"<{self.__class__.__name__}> {self._cache!r}"

    def resolve(self, ref: UnitRef) -> int | None:
        """
        Resolve a unit reference to a valid unit id, or None for references
        that name no unit (including objects that are not unit references).
        """
        if isinstance(ref, ByUnitId):
            unit_id = ref.unit_id
        elif isinstance(ref, ByTitleText):
            unit_id = self.resolver.resolve_title(ref.text) if ref.text.strip() else None
        elif isinstance(ref, ByFileHandle):
            unit_id = self.resolver.resolve_file(ref.file) if ref.file is not None else None
        else:
            log.warning(f"Unsupported unit reference treated as unrated: {ref!r}")
            return None
        return unit_id if is_valid_unit_id(unit_id) else None

    def get_rating(self, unit_id: int | None) -> MaybeRating:
        """
        Return the unit's rating code, or None if it is unrated or unknown.

        A failed database read is logged and treated as unrated, unless this
        store is strict, in which case StoreUnavailable is raised. Failures are
        never cached.
        """
        if not is_valid_unit_id(unit_id):
            return None

        cached = self._cache.get(unit_id)
        if cached is not MISSING:
            return cached

        try:
            value = (
                PageProp.objects.ratings()
                .filter(page_id=unit_id)
                .values_list("value", flat=True)
                .first()
            )
        except DatabaseError as exc:
            if self.strict:
                raise StoreUnavailable(unit_id, "read") from exc
            log.exception(f"Unable to read content rating for unit {unit_id}; treating it as unrated")
            return None

        code = value.upper() if value else None
        self._cache.set(unit_id, code)
        return code

    def get_rating_for(self, ref: UnitRef) -> MaybeRating:
        return self.get_rating(self.resolve(ref))

    def prefetch(self, unit_ids: Iterable[int]) -> None:
        """
        Load the ratings of many units with one query, e.g. before a gallery is
        filtered. Units already in the cache are skipped.
        """
        wanted = {
            unit_id for unit_id in unit_ids
            if is_valid_unit_id(unit_id) and unit_id not in self._cache
        }
        if not wanted:
            return
        try:
            found = dict(
                PageProp.objects.ratings()
                .filter(page_id__in=wanted)
                .values_list("page_id", "value")
            )
        except DatabaseError as exc:
            if self.strict:
                raise StoreUnavailable(None, "read") from exc
            log.exception(f"Unable to prefetch content ratings for {len(wanted)} units")
            return
        for unit_id in wanted:
            value = found.get(unit_id)
            self._cache.set(unit_id, value.upper() if value else None)

    def set_rating(self, unit_id: int | None, code: MaybeRating) -> None:
        """
        Store ``code`` as the unit's rating, replacing any previous one.

        Storing no code removes the rating. Writes go straight to the database
        and then into the cache, so the next read in this process sees them.
        """
        if not code:
            self.clear_rating(unit_id)
            return
        if not is_valid_unit_id(unit_id):
            log.debug(f"Not storing content rating {code} for unit without identity: {unit_id!r}")
            return

        code = code.upper()
        try:
            PageProp.objects.update_or_create(
                page_id=unit_id,
                propname=CONTENT_RATING_PROPERTY,
                defaults={"value": code},
            )
        except DatabaseError as exc:
            self._cache.invalidate(unit_id)
            raise StoreUnavailable(unit_id, "write") from exc
        self._cache.set(unit_id, code)

    def clear_rating(self, unit_id: int | None) -> None:
        """
        Remove the unit's rating, if it has one.
        """
        if not is_valid_unit_id(unit_id):
            return
        try:
            PageProp.objects.ratings().filter(page_id=unit_id).delete()
        except DatabaseError as exc:
            self._cache.invalidate(unit_id)
            raise StoreUnavailable(unit_id, "delete") from exc
        self._cache.set(unit_id, None)

    def clear_cache(self) -> None:
        self._cache.clear()
