"""WSGI config for the community water billing project."""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'community_water.settings')

application = get_wsgi_application()
