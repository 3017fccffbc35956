# chat/routing.py
from django.urls import re_path
from .consumers import GlobalConsumer

websocket_urlpatterns = [
    re_path(r'ws/global/$', GlobalConsumer.as_asgi()),
]
