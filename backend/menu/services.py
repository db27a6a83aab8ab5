from .models import MenuItem


def get_menu_items(menu_item_ids):
    """Returns {id: MenuItem} for the ids that exist."""
    return {item.id: item for item in MenuItem.objects.filter(pk__in=set(menu_item_ids))}
