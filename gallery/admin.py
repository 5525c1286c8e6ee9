from django.contrib import admin

from .forms import PictureForm
from .models import Picture


@admin.register(Picture)
class PictureAdmin(admin.ModelAdmin):
    form = PictureForm
    list_display = ("title", "image", "updated_at")
    search_fields = ("title",)
    ordering = ("-updated_at",)
