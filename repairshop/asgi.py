"""
ASGI config for the RepairShop project.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "repairshop.settings.production")

application = get_asgi_application()
