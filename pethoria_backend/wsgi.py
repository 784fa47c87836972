"""
WSGI config for pethoria_backend project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'pethoria_backend.settings')

application = get_wsgi_application()
