"""
Django rules-based permissions for content rating
"""
from __future__ import annotations

from typing import Callable, Union

import django.contrib.auth.models
# typing support in rules depends on https://github.com/dfunckt/django-rules/pull/177
import rules  # type: ignore[import]

UserType = Union[
    django.contrib.auth.models.User, django.contrib.auth.models.AnonymousUser
]


@rules.predicate
def is_blocked(user: UserType) -> bool:
    """
    Hosts that can block accounts flag them with an ``is_blocked`` attribute.
    """
    return bool(getattr(user, "is_blocked", False))


# Only signed-in, active, unblocked users may opt in to rated content.
# Everybody else sees every rated region removed.
is_eligible_viewer: Callable[[UserType], bool] = rules.is_authenticated & rules.is_active & ~is_blocked

# Global staff manage stored ratings directly (e.g. in the Django admin).
# (Superusers can already do anything)
is_rating_admin: Callable[[UserType], bool] = rules.is_staff

rules.add_perm("cr_rating.hold_rating_preferences", is_eligible_viewer)

# PageProp
rules.add_perm("cr_rating.add_pageprop", is_rating_admin)
rules.add_perm("cr_rating.change_pageprop", is_rating_admin)
rules.add_perm("cr_rating.delete_pageprop", is_rating_admin)
rules.add_perm("cr_rating.view_pageprop", is_rating_admin)
