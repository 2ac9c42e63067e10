"""
Redaction: the second rendering pass.

Once a page is fully rendered, every marked region is either unwrapped (the
viewer opted in to that rating: only the marker tokens go away) or removed (the
tokens and everything between them go away).

The text is tokenized once. Resolution then walks the rating codes in alias
table order and works on the token list only: for a removed code, each live
start token is paired with the first live end token of the same code after it,
and every token inside the removed span dies with it, so a region that is
already gone can never be matched again by a later code. Finally the surviving
text is stitched together from the removed spans.
"""
from __future__ import annotations

import bisect
import logging
import re
from collections import defaultdict

from attrs import define

from content_rating.lib.cache import lru_cache

from .aliases import AliasTable
from .data import RatingCode, Viewer, ViewerPermissions

log = logging.getLogger(__name__)

BLOCK_START = "start"
BLOCK_END = "end"
INLINE_PREFIX = "prefix"
INLINE_SUFFIX = "suffix"

# (opening kind, closing kind), in the order regions are removed for one code.
REGION_KINDS = (
    (BLOCK_START, BLOCK_END),
    (INLINE_PREFIX, INLINE_SUFFIX),
)


@lru_cache(maxsize=None)
def marker_pattern(codes: tuple[RatingCode, ...]) -> re.Pattern:
    """
    Compiled pattern matching every marker token of the given codes.
    """
    alternatives = "|".join(
        re.escape(code.lower()) for code in sorted(codes, key=lambda code: (-len(code), code))
    )
    return re.compile(
        rf"(?P<block><rating-(?P<side>start|end)-(?P<bcode>{alternatives})></rating-(?P=side)-(?P=bcode)>)"
        rf"|(?P<prefix><!--cr-(?P<pcode>{alternatives})-)"
        rf"|(?P<suffix>-(?P<scode>{alternatives})-cr-->)"
    )


@define
class MarkerToken:
    """
    One marker token found in rendered text.
    """

    start: int
    end: int
    kind: str
    code: RatingCode
    live: bool = True


class Redactor:
    """
    Removes or unwraps marked regions for one viewer.
    """

    def __init__(self, aliases: AliasTable, strip_unbalanced: bool = False):
        self.aliases = aliases
        self.strip_unbalanced = strip_unbalanced

    def tokenize(self, text: str) -> list[MarkerToken]:
        """
        All marker tokens of known codes in ``text``, in document order.
        """
        if not self.aliases.codes:
            return []
        tokens = []
        for match in marker_pattern(self.aliases.codes).finditer(text):
            if match.group("block"):
                kind = BLOCK_START if match.group("side") == "start" else BLOCK_END
                code = match.group("bcode")
            elif match.group("prefix"):
                kind = INLINE_PREFIX
                code = match.group("pcode")
            else:
                kind = INLINE_SUFFIX
                code = match.group("scode")
            tokens.append(MarkerToken(match.start(), match.end(), kind, code.upper()))
        return tokens

    def redact(
        self,
        full_text: str,
        permissions: ViewerPermissions | None = None,
        eligible: bool = False,
    ) -> str:
        """
        Redact a fully rendered document.

        Ineligible viewers get every rated region removed whatever their
        ``permissions`` say; so does any code missing from ``permissions``.
        """
        return self.redact_for(full_text, Viewer(eligible=eligible, permissions=permissions))

    def redact_for(self, full_text: str, viewer: Viewer) -> str:
        if not full_text:
            return full_text or ""

        tokens = self.tokenize(full_text)
        if not tokens:
            return full_text

        starts = [token.start for token in tokens]
        by_code: dict[RatingCode, list[MarkerToken]] = defaultdict(list)
        for token in tokens:
            by_code[token.code].append(token)

        spans: list[tuple[int, int]] = []
        for code in self.aliases.codes:
            code_tokens = by_code.get(code)
            if not code_tokens:
                continue
            if viewer.allows(code):
                for token in code_tokens:
                    if token.live:
                        token.live = False
                        spans.append((token.start, token.end))
                continue
            for opening, closing in REGION_KINDS:
                self._remove_regions(tokens, starts, code_tokens, opening, closing, spans)

        leftover = [token for token in tokens if token.live]
        if leftover:
            log.warning(
                f"{len(leftover)} unbalanced content rating marker(s) left after redaction: "
                + ", ".join(f"{token.kind}-{token.code.lower()}@{token.start}" for token in leftover)
            )
            if self.strip_unbalanced:
                spans.extend((token.start, token.end) for token in leftover)

        return _cut(full_text, spans)

    @staticmethod
    def _remove_regions(tokens, starts, code_tokens, opening, closing, spans):
        """
        Pair each live ``opening`` token with the first live ``closing`` token
        after it and remove the whole span. Openings seen while a region is
        already open are swallowed by that region; closings with no open region
        are left alone.
        """
        pending = None
        for token in code_tokens:
            if not token.live or token.kind not in (opening, closing):
                continue
            if token.kind == opening:
                if pending is None:
                    pending = token
            elif pending is not None:
                spans.append((pending.start, token.end))
                index = bisect.bisect_left(starts, pending.start)
                while index < len(tokens) and tokens[index].start < token.end:
                    tokens[index].live = False
                    index += 1
                pending = None


def _cut(text: str, spans: list[tuple[int, int]]) -> str:
    """
    Return ``text`` without the given (possibly nested) spans.
    """
    if not spans:
        return text
    pieces = []
    position = 0
    for start, end in sorted(spans):
        if end <= position:
            continue
        if start > position:
            pieces.append(text[position:start])
        position = max(position, end)
    pieces.append(text[position:])
    return "".join(pieces)
