"""
Field helpers shared by content rating models.

Property names and rating codes are matched exactly, whatever the backend's
default collation: "content-rating" and "Content-Rating" are different property
names, and "R18" and "r18" different stored values. The text columns here are
therefore always given a byte-wise collation for the connection's vendor.
"""
from __future__ import annotations

from django.db import models

# Byte-wise collation per database vendor. Vendors missing here keep their
# default collation.
BINARY_COLLATIONS = {
    "mysql": "utf8mb4_bin",
    "postgresql": "C",
    "sqlite": "BINARY",
}


class BinaryCollationMixin:
    """
    Compare the column byte for byte on every vendor in ``BINARY_COLLATIONS``.

    The collation is chosen when the column is created, not stored on the
    field, so a ``db_collation`` argument is an error.
    """

    def __init__(self, *args, **kwargs):
        if kwargs.get("db_collation"):
            raise TypeError(f"{self.__class__.__name__} always uses a binary collation")
        super().__init__(*args, **kwargs)

    def db_parameters(self, connection):
        db_params = super().db_parameters(connection)
        collation = BINARY_COLLATIONS.get(connection.vendor)
        if collation:
            db_params["collation"] = collation
        return db_params


class BinaryCharField(BinaryCollationMixin, models.CharField):
    pass


class BinaryTextField(BinaryCollationMixin, models.TextField):
    pass


def case_sensitive_char_field(**kwargs) -> BinaryCharField:
    """
    Return a case-sensitive ``BinaryCharField``.

    Unique indexes on this field are case sensitive as well.
    """
    final_kwargs = {"null": False}
    final_kwargs.update(kwargs)
    return BinaryCharField(**final_kwargs)


def case_sensitive_text_field(**kwargs) -> BinaryTextField:
    final_kwargs = {"null": False}
    final_kwargs.update(kwargs)
    return BinaryTextField(**final_kwargs)


def unit_id_field(**kwargs) -> models.PositiveBigIntegerField:
    """
    Integer identity of a content unit (page or media file).

    Identities are resolved by the host application, so this is deliberately
    not a ForeignKey.
    """
    final_kwargs = {
        "null": False,
        "db_index": True,
    }
    final_kwargs.update(kwargs)
    return models.PositiveBigIntegerField(**final_kwargs)
