"""WSGI config for the Trackside project."""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'trackside.settings')

application = get_wsgi_application()
