"""
Content rating Django application initialization.
"""

from django.apps import AppConfig


class ContentRatingConfig(AppConfig):
    """
    Configuration for the content rating Django application.

    The rating engine (alias table, rating store, marker emitter and redactor)
    is built once here, when the app registry is ready, and is fetched by
    callers through ``api.get_engine()``.
    """

    name = "content_rating.core.rating"
    verbose_name = "Content Rating"
    default_auto_field = "django.db.models.BigAutoField"
    label = "cr_rating"

    engine = None

    def ready(self):
        # pylint: disable=import-outside-toplevel,unused-import
        from . import rules  # registers our django-rules permissions
        from .engine import ContentRatingEngine

        self.engine = ContentRatingEngine.from_settings()
