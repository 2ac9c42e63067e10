"""
Viewer preferences: one "show / hide" choice per rating code.

Preference storage and the preferences page belong to the host; this module
only names the preferences, describes the form fields for them, and turns a
user plus their stored options into a ``Viewer`` for redaction.
"""
from __future__ import annotations

from typing import Any, Callable

import rules  # type: ignore[import]
from django.utils.translation import gettext as _

from . import rules as _rating_rules  # noqa: F401 pylint: disable=unused-import
from .aliases import AliasTable
from .data import RatingCode, Viewer

PREFERENCE_SECTION = "rendering/content-rating"

# get_option(name, default) as provided by the host's preference store
OptionGetter = Callable[[str, Any], Any]


def preference_name(code: RatingCode) -> str:
    """
    Name of the preference that opts a user in to ``code``, e.g. "cr-allow-r18".
    """
    return f"cr-allow-{code.lower()}"


def option_enabled(value: Any) -> bool:
    """
    Read a stored option as a flag. The preference form stores "1"/"0".
    """
    return value is True or value == 1 or value == "1"


def can_hold_preferences(user) -> bool:
    """
    Anonymous, inactive and blocked users cannot opt in to anything.

    The rule is evaluated directly rather than through ``user.has_perm``,
    which grants every permission to active superusers, blocked or not.
    """
    return user is not None and rules.has_perm("cr_rating.hold_rating_preferences", user)


def viewer_for_user(user, get_option: OptionGetter, aliases: AliasTable) -> Viewer:
    """
    Build the Viewer for ``user`` from their stored preferences.
    """
    if not can_hold_preferences(user):
        return Viewer.anonymous()
    return Viewer(
        eligible=True,
        permissions={
            code: option_enabled(get_option(preference_name(code), False))
            for code in aliases.codes
        },
    )


def get_preference_definitions(user, get_option: OptionGetter, aliases: AliasTable) -> dict[str, dict[str, Any]]:
    """
    Form field descriptors for the preferences page, keyed by preference name.

    Each rating is a show/hide radio choice, defaulting to whatever the user
    chose before (or "hide"). Users who cannot hold preferences get none.
    """
    if not can_hold_preferences(user):
        return {}

    options = {
        _("Show"): "1",
        _("Hide"): "0",
    }
    definitions = {}
    for code in aliases.codes:
        name = preference_name(code)
        definitions[name] = {
            "type": "radio",
            "label-message": f"content-rating-{code.lower()}",
            "section": PREFERENCE_SECTION,
            "options": options,
            "flatlist": True,
            "default": "1" if option_enabled(get_option(name, False)) else "0",
        }
    return definitions
