from django.apps import AppConfig


class RealtimeConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "realtime"

    def ready(self):
        """
        Builds the process-wide event hub once. URL and websocket routing
        hand it to views and consumers explicitly.
        """
        from channels.layers import get_channel_layer

        from .emitters import ClientEmitters
        from .hub import EventHub
        from .signals import connect_collaborator_signals

        self.hub = EventHub(get_channel_layer())
        self.emitters = ClientEmitters(self.hub)
        connect_collaborator_signals(self.emitters)
