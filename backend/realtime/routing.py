from django.urls import re_path

from .consumers import StaffConsumer


def build_websocket_urlpatterns(hub):
    return [
        re_path(r"ws/floor/$", StaffConsumer.as_asgi(hub=hub)),
    ]
