"""
Test the rating store and its cache
"""
from unittest import mock

import ddt  # type: ignore[import]
import pytest
from django.db import DatabaseError

from content_rating.core.rating.data import ByFileHandle, ByTitleText, ByUnitId
from content_rating.core.rating.exceptions import StoreUnavailable
from content_rating.core.rating.models import CONTENT_RATING_PROPERTY, PageProp
from content_rating.core.rating.store import RatingStore, UnitResolver, is_valid_unit_id
from content_rating.lib.test_utils import TestCase


class TitleResolver(UnitResolver):
    """
    Resolves "Page<N>" titles to unit N.
    """

    def resolve_title(self, text):
        if text.startswith("Page"):
            return int(text[4:])
        return None


class FakeFile:
    def __init__(self, unit_id):
        self.unit_id = unit_id


@ddt.ddt
class TestRatingStore(TestCase):
    """
    Reads, writes and caching of unit ratings.
    """

    def setUp(self):
        super().setUp()
        self.store = RatingStore(resolver=TitleResolver())

    def test_set_then_get(self):
        self.store.set_rating(7, "R18")
        assert self.store.get_rating(7) == "R18"
        assert PageProp.objects.get(page_id=7).value == "R18"

    def test_set_normalizes_case(self):
        self.store.set_rating(7, "r18g")
        assert self.store.get_rating(7) == "R18G"
        self.store.clear_cache()
        assert self.store.get_rating(7) == "R18G"

    def test_overwrite(self):
        """
        A unit has at most one rating; setting a new one replaces it.
        """
        self.store.set_rating(7, "R15")
        self.store.set_rating(7, "R18")
        assert self.store.get_rating(7) == "R18"
        assert PageProp.objects.ratings().filter(page_id=7).count() == 1

    def test_clear(self):
        self.store.set_rating(7, "R18")
        self.store.clear_rating(7)
        assert self.store.get_rating(7) is None
        assert not PageProp.objects.filter(page_id=7).exists()

    @ddt.data(None, "")
    def test_set_nothing_clears(self, code):
        self.store.set_rating(7, "R18")
        self.store.set_rating(7, code)
        assert self.store.get_rating(7) is None
        assert not PageProp.objects.filter(page_id=7).exists()

    def test_no_stale_read_after_write(self):
        """
        A cached value is replaced by the write, without another query.
        """
        assert self.store.get_rating(7) is None
        self.store.set_rating(7, "R15")
        with self.assertNumQueries(0):
            assert self.store.get_rating(7) == "R15"
        self.store.clear_rating(7)
        with self.assertNumQueries(0):
            assert self.store.get_rating(7) is None

    def test_cache_negative_results(self):
        with self.assertNumQueries(1):
            assert self.store.get_rating(3) is None
            assert self.store.get_rating(3) is None

    def test_cache_positive_results(self):
        PageProp.objects.create(page_id=3, propname=CONTENT_RATING_PROPERTY, value="R15")
        with self.assertNumQueries(1):
            assert self.store.get_rating(3) == "R15"
            assert self.store.get_rating(3) == "R15"

    def test_other_properties_ignored(self):
        PageProp.objects.create(page_id=3, propname="displaytitle", value="R18")
        assert self.store.get_rating(3) is None
        self.store.set_rating(3, "R15")
        self.store.clear_rating(3)
        assert PageProp.objects.filter(page_id=3, propname="displaytitle").exists()

    @ddt.data(None, 0, -4, True, "7", 7.0)
    def test_invalid_identity(self, unit_id):
        """
        Units without a valid identity are unrated, and nothing is queried or
        written for them.
        """
        assert not is_valid_unit_id(unit_id)
        with self.assertNumQueries(0):
            assert self.store.get_rating(unit_id) is None
            self.store.set_rating(unit_id, "R18")
            self.store.clear_rating(unit_id)

    def test_resolve(self):
        self.store.set_rating(12, "R18")
        assert self.store.resolve(ByUnitId(12)) == 12
        assert self.store.resolve(ByTitleText("Page12")) == 12
        assert self.store.resolve(ByFileHandle(FakeFile(12))) == 12
        assert self.store.get_rating_for(ByTitleText("Page12")) == "R18"
        assert self.store.get_rating_for(ByFileHandle(FakeFile(12))) == "R18"

    @ddt.data(
        ByUnitId(0),
        ByTitleText(""),
        ByTitleText("Nowhere"),
        ByTitleText("Page0"),
        ByFileHandle(None),
        ByFileHandle(object()),
    )
    def test_resolve_nothing(self, ref):
        assert self.store.resolve(ref) is None
        assert self.store.get_rating_for(ref) is None

    def test_resolve_unsupported(self):
        """
        Objects that are not unit references name no unit.
        """
        with self.assertLogs("content_rating.core.rating.store", level="WARNING"):
            assert self.store.resolve("Page12") is None
            assert self.store.get_rating_for(12) is None

    def test_default_resolver_has_no_titles(self):
        store = RatingStore()
        assert store.resolve(ByTitleText("Page12")) is None
        assert store.resolve(ByFileHandle(FakeFile(12))) == 12

    def test_prefetch(self):
        PageProp.objects.create(page_id=1, propname=CONTENT_RATING_PROPERTY, value="R15")
        PageProp.objects.create(page_id=2, propname=CONTENT_RATING_PROPERTY, value="R18")
        with self.assertNumQueries(1):
            self.store.prefetch([1, 2, 3, 0, None])
            assert self.store.get_rating(1) == "R15"
            assert self.store.get_rating(2) == "R18"
            assert self.store.get_rating(3) is None
        with self.assertNumQueries(0):
            self.store.prefetch([1, 2, 3])

    def test_read_failure_degrades(self):
        """
        A failed read is logged and treated as unrated, and is not cached.
        """
        with mock.patch.object(PageProp.objects, "ratings", side_effect=DatabaseError("gone")):
            with self.assertLogs("content_rating.core.rating.store", level="ERROR"):
                assert self.store.get_rating(5) is None
        self.store.set_rating(5, "R18")
        self.store.clear_cache()
        assert self.store.get_rating(5) == "R18"

    def test_read_failure_strict(self):
        store = RatingStore(strict=True)
        with mock.patch.object(PageProp.objects, "ratings", side_effect=DatabaseError("gone")):
            with pytest.raises(StoreUnavailable) as exc_info:
                store.get_rating(5)
        assert exc_info.value.unit_id == 5
        assert isinstance(exc_info.value.__cause__, DatabaseError)
        assert "unit 5" in str(exc_info.value)

    def test_write_failure(self):
        """
        Writes never fail silently, and leave no stale cache entry behind.
        """
        self.store.set_rating(5, "R15")
        with mock.patch.object(PageProp.objects, "update_or_create", side_effect=DatabaseError("gone")):
            with pytest.raises(StoreUnavailable):
                self.store.set_rating(5, "R18")
        with self.assertNumQueries(1):
            assert self.store.get_rating(5) == "R15"

    def test_clear_failure(self):
        """
        A failed delete raises and drops the cached value, so the next read
        goes back to the database.
        """
        self.store.set_rating(5, "R15")
        with mock.patch.object(PageProp.objects, "ratings", side_effect=DatabaseError("gone")):
            with pytest.raises(StoreUnavailable) as exc_info:
                self.store.clear_rating(5)
        assert exc_info.value.unit_id == 5
        assert exc_info.value.operation == "delete"
        assert isinstance(exc_info.value.__cause__, DatabaseError)
        with self.assertNumQueries(1):
            assert self.store.get_rating(5) == "R15"

    def test_prefetch_failure_degrades(self):
        with mock.patch.object(PageProp.objects, "ratings", side_effect=DatabaseError("gone")):
            with self.assertLogs("content_rating.core.rating.store", level="ERROR"):
                self.store.prefetch([1, 2])
        PageProp.objects.create(page_id=1, propname=CONTENT_RATING_PROPERTY, value="R15")
        assert self.store.get_rating(1) == "R15"

    def test_prefetch_failure_strict(self):
        store = RatingStore(strict=True)
        with mock.patch.object(PageProp.objects, "ratings", side_effect=DatabaseError("gone")):
            with pytest.raises(StoreUnavailable) as exc_info:
                store.prefetch([1, 2])
        assert exc_info.value.operation == "read"
        assert isinstance(exc_info.value.__cause__, DatabaseError)
