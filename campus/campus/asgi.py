# campus/campus/asgi.py
import os
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'campus.settings')
import django
django.setup()
from django.core.asgi import get_asgi_application
from channels.routing import ProtocolTypeRouter, URLRouter
from channels.auth import AuthMiddlewareStack
from chat.routing import websocket_urlpatterns as chat_websocket_urlpatterns
from live.routing import websocket_urlpatterns as live_websocket_urlpatterns


application = ProtocolTypeRouter({
    "http": get_asgi_application(),
    "websocket": AuthMiddlewareStack(
        URLRouter(
            chat_websocket_urlpatterns +
            live_websocket_urlpatterns
        )
    ),
})
