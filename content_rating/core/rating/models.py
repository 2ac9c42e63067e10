"""
Content rating data models
"""
from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _

from content_rating.lib.fields import case_sensitive_char_field, case_sensitive_text_field, unit_id_field

# Property name under which a unit's rating code is stored.
CONTENT_RATING_PROPERTY = "content-rating"


class PagePropQuerySet(models.QuerySet):
    """
    QuerySet helpers for PageProp
    """

    def ratings(self) -> PagePropQuerySet:
        """
        Only the rows that carry a content rating.
        """
        return self.filter(propname=CONTENT_RATING_PROPERTY)


class PageProp(models.Model):
    """
    A single named property of a content unit (a page or a media file).

    This is a generic page-property table: each unit has at most one row per
    property name. Content rating only ever uses the "content-rating"
    property, whose value is an upper-case rating code such as "R18". A unit
    without a row is unrated.
    """

    id = models.BigAutoField(primary_key=True)
    page_id = unit_id_field(
        help_text=_("Identity of the page or media file this property belongs to."),
    )
    propname = case_sensitive_char_field(
        max_length=60,
        help_text=_("Name of the property, e.g. 'content-rating'."),
    )
    value = case_sensitive_text_field(
        blank=True,
        help_text=_("Value of the property; for content ratings, the canonical rating code."),
    )

    objects = PagePropQuerySet.as_manager()

    class Meta:
        db_table = "cr_page_props"
        verbose_name = "Page property"
        verbose_name_plural = "Page properties"
        constraints = [
            models.UniqueConstraint(
                fields=["page_id", "propname"],
                name="cr_page_props_uniq_page_propname",
            ),
        ]
        indexes = [
            models.Index(fields=["propname", "page_id"], name="cr_page_props_propname_idx"),
        ]

    def __repr__(self):
        """
        Developer-facing representation of a PageProp.
        """
        return str(self)

    def __str__(self):
        """
        User-facing string representation of a PageProp.
        """
        return f"<{self.__class__.__name__}> ({self.page_id}) {self.propname}={self.value}"

    def clean(self):
        """
        Ratings must be stored as known, upper-case codes.
        """
        super().clean()
        if self.propname != CONTENT_RATING_PROPERTY:
            return

        # pylint: disable=import-outside-toplevel
        from .api import get_engine

        code = get_engine().aliases.classify(self.value)
        if code is None:
            raise ValidationError(
                _("'%(value)s' is not a known content rating."),
                params={"value": self.value},
            )
        self.value = code
