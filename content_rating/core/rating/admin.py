"""
Content rating admin
"""
from __future__ import annotations

from django.contrib import admin

from .api import get_engine
from .models import CONTENT_RATING_PROPERTY, PageProp


@admin.register(PageProp)
class PagePropAdmin(admin.ModelAdmin):
    """
    Admin definition for PageProp model
    """
    fields = ["page_id", "propname", "value"]
    list_display = ["page_id", "propname", "value"]
    list_filter = ["propname", "value"]
    search_fields = ["=page_id"]
    readonly_fields = ["page_id", "propname"]

    def has_add_permission(self, request):
        """
        Don't create PageProps using the django admin. Ratings are set by
        rendering pages.
        """
        return False

    def save_model(self, request, obj, form, change):
        """
        Ratings are written through the rating store so that its cache sees
        the change.
        """
        if obj.propname == CONTENT_RATING_PROPERTY:
            get_engine().store.set_rating(obj.page_id, obj.value)
        else:
            super().save_model(request, obj, form, change)

    def delete_model(self, request, obj):
        if obj.propname == CONTENT_RATING_PROPERTY:
            get_engine().store.clear_rating(obj.page_id)
        else:
            super().delete_model(request, obj)
