"""
Data types used by the content rating engine.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from attrs import define, field, frozen
from typing_extensions import TypeAlias

# Canonical, upper-case rating code such as "R18". None means "no rating".
RatingCode: TypeAlias = str
MaybeRating: TypeAlias = Optional[RatingCode]

# Viewer preference per rating code: "may view content at this rating".
ViewerPermissions: TypeAlias = Mapping[str, bool]


@frozen
class ByUnitId:
    """
    Reference to a content unit by its integer identity.
    """

    unit_id: int


@frozen
class ByTitleText:
    """
    Reference to a content unit by the text of its title, e.g. "File:Cat.png".
    """

    text: str


@frozen
class ByFileHandle:
    """
    Reference to a content unit through a host file object.
    """

    file: Any


UnitRef: TypeAlias = Union[ByUnitId, ByTitleText, ByFileHandle]


def _normalize_permissions(permissions: ViewerPermissions | None) -> dict[str, bool]:
    return {code.upper(): bool(allowed) for code, allowed in (permissions or {}).items()}


@define
class Viewer:
    """
    The person a page is being rendered for.

    Ineligible viewers (anonymous, blocked) may not hold any rating preference,
    so ``allows()`` is False for every code no matter what ``permissions``
    says.
    """

    eligible: bool = False
    permissions: dict[str, bool] = field(factory=dict, converter=_normalize_permissions)

    @classmethod
    def anonymous(cls) -> Viewer:
        return cls(eligible=False)

    def allows(self, code: MaybeRating) -> bool:
        """
        Whether this viewer may see content rated ``code``.

        Unrated content (``code`` empty or None) is always allowed.
        """
        if not code:
            return True
        if not self.eligible:
            return False
        return self.permissions.get(code.upper(), False)
