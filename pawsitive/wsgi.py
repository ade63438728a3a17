import os

from django.core.wsgi import get_wsgi_application

# Point WSGI at the project settings
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "pawsitive.settings")

application = get_wsgi_application()
