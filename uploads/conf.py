# uploads/conf.py

from urllib.parse import urlencode

from django.conf import settings
from django.urls import reverse


DEFAULTS = {
    "UPLOAD_DIR_NAME": "uploads",
}


def get_setting(key):
    """
    Read an uploads setting from the Django settings,
    falling back to the package default.
    """
    return getattr(settings, key, DEFAULTS.get(key))


def build_remove_image_url(module_name, object_id):
    """Return the "remove image" URL of a module for a given object id."""
    path = reverse(f"{module_name}:remove_image")
    return f"{path}?{urlencode({'id': object_id})}"
