"""
The content rating engine: one object owning every piece of the pipeline.

It is built once per process (see ``apps.ContentRatingConfig.ready``) and
handed to callers through ``api.get_engine()``, so the alias table, the rating
cache and their lifetimes all hang off a single owner instead of module
globals.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping

from django.core.exceptions import ImproperlyConfigured

from . import conf
from .aliases import AliasTable
from .gate import MediaGate
from .markers import MarkerEmitter
from .redaction import Redactor
from .store import RatingStore, UnitResolver, load_resolver

log = logging.getLogger(__name__)


class ContentRatingEngine:
    """
    Alias table + rating store + marker emitter + redactor + media gate.
    """

    def __init__(
        self,
        aliases: AliasTable,
        store: RatingStore,
        placeholder: str = "",
        strip_unbalanced: bool = False,
    ):
        self.aliases = aliases
        self.store = store
        self.markers = MarkerEmitter(aliases, store)
        self.redactor = Redactor(aliases, strip_unbalanced=strip_unbalanced)
        self.gate = MediaGate(store, placeholder=placeholder)

    def __repr__(self):
        return f"<{self.__class__.__name__}> {self.aliases!r}"

    @classmethod
    def build(
        cls,
        aliases: Mapping[str, Any] | None = None,
        resolver: UnitResolver | None = None,
        strict: bool = False,
        placeholder: str = "",
        strip_unbalanced: bool = False,
    ) -> ContentRatingEngine:
        """
        Build an engine from plain values; unset aliases use the defaults.
        """
        table = AliasTable(aliases if aliases is not None else conf.DEFAULTS["ALIASES"])
        table.validate()
        return cls(
            table,
            RatingStore(resolver=resolver, strict=strict),
            placeholder=placeholder,
            strip_unbalanced=strip_unbalanced,
        )

    @classmethod
    def from_settings(cls) -> ContentRatingEngine:
        """
        Build an engine from the ``CONTENT_RATING`` Django setting.
        """
        try:
            resolver = load_resolver(conf.get_setting("RESOLVER"))
        except ImportError as exc:
            raise ImproperlyConfigured(
                f"Unable to import content rating resolver {conf.get_setting('RESOLVER')!r}"
            ) from exc

        engine = cls.build(
            aliases=conf.get_setting("ALIASES"),
            resolver=resolver,
            strict=conf.get_setting("STRICT_STORE_ERRORS"),
            placeholder=conf.get_setting("WARNING_IMAGE"),
            strip_unbalanced=conf.get_setting("STRIP_UNBALANCED_MARKERS"),
        )
        log.info(f"Content rating engine ready with codes: {', '.join(engine.aliases.codes)}")
        return engine
