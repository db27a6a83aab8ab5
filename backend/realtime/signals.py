"""
Publishes reference-data changes made outside the order flow (admin,
back-office tooling, staff accounts) through the same hub the order flow
uses.

Table status changes caused by orders and settlements are published by
the services themselves, so Table saves only announce creation here.
"""
import logging

from django.db.models.signals import post_delete, post_save

logger = logging.getLogger(__name__)


def connect_collaborator_signals(emitters):
    from menu.models import MenuItem
    from menu.serializers import MenuItemSerializer
    from tables.models import Layout, Table
    from tables.serializers import LayoutSerializer, TableSerializer
    from users.models import User
    from users.serializers import UserSerializer

    def menu_item_saved(sender, instance, created, **kwargs):
        data = MenuItemSerializer(instance).data
        if created:
            emitters.menu_item_created(data)
        else:
            emitters.menu_item_updated(data)

    def menu_item_deleted(sender, instance, **kwargs):
        emitters.menu_item_deleted(instance.pk)

    def layout_saved(sender, instance, created, **kwargs):
        data = LayoutSerializer(instance).data
        if created:
            emitters.layout_created(data)
        else:
            emitters.layout_updated(data)

    def layout_deleted(sender, instance, **kwargs):
        emitters.layout_deleted(instance.pk)

    def table_saved(sender, instance, created, **kwargs):
        if created:
            emitters.table_created(TableSerializer(instance).data)

    def table_deleted(sender, instance, **kwargs):
        emitters.table_deleted(instance.pk, layout_id=instance.layout_id)

    def user_saved(sender, instance, created, **kwargs):
        emitters.user_changed("created" if created else "updated", UserSerializer(instance).data)

    def user_deleted(sender, instance, **kwargs):
        emitters.user_changed("deleted", {"id": instance.pk})

    post_save.connect(menu_item_saved, sender=MenuItem, weak=False, dispatch_uid="realtime.menu_item_saved")
    post_delete.connect(menu_item_deleted, sender=MenuItem, weak=False, dispatch_uid="realtime.menu_item_deleted")
    post_save.connect(layout_saved, sender=Layout, weak=False, dispatch_uid="realtime.layout_saved")
    post_delete.connect(layout_deleted, sender=Layout, weak=False, dispatch_uid="realtime.layout_deleted")
    post_save.connect(table_saved, sender=Table, weak=False, dispatch_uid="realtime.table_saved")
    post_delete.connect(table_deleted, sender=Table, weak=False, dispatch_uid="realtime.table_deleted")
    post_save.connect(user_saved, sender=User, weak=False, dispatch_uid="realtime.user_saved")
    post_delete.connect(user_deleted, sender=User, weak=False, dispatch_uid="realtime.user_deleted")

    logger.debug("Collaborator change signals connected to the event hub")
