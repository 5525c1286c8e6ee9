"""
WSGI config for Picture Dock project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "picture_dock.settings")

application = get_wsgi_application()
