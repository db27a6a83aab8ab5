import os

import django

# Set the Django settings module first
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core_backend.settings")

# Setup Django explicitly before any models are imported
django.setup()

from channels.routing import ProtocolTypeRouter, URLRouter
from django.apps import apps
from django.core.asgi import get_asgi_application

from core_backend.jwt_websocket_middleware import JWTAuthMiddleware
from realtime.routing import build_websocket_urlpatterns

django_asgi_app = get_asgi_application()

# The hub built in RealtimeConfig.ready() is shared by HTTP views and the
# websocket consumer.
hub = apps.get_app_config("realtime").hub

application = ProtocolTypeRouter(
    {
        "http": django_asgi_app,
        "websocket": JWTAuthMiddleware(URLRouter(build_websocket_urlpatterns(hub))),
    }
)
