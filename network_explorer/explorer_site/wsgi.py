"""WSGI config for the network explorer dashboard."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "explorer_site.settings")

application = get_wsgi_application()
