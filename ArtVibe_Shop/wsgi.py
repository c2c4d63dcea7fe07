"""
WSGI config for ArtVibe_Shop project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'ArtVibe_Shop.settings')

application = get_wsgi_application()
