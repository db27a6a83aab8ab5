import django_filters

from .models import Order


class OrderFilter(django_filters.FilterSet):
    """
    Filters for the order list.

    ``status`` accepts a single label or a comma separated list
    (``?status=pendente,aceite``).
    """

    status = django_filters.CharFilter(method="filter_status")
    created_at__gte = django_filters.DateTimeFilter(field_name="created_at", lookup_expr="gte")
    created_at__lte = django_filters.DateTimeFilter(field_name="created_at", lookup_expr="lte")

    class Meta:
        model = Order
        fields = ["status"]

    def filter_status(self, queryset, name, value):
        statuses = [part.strip() for part in value.split(",") if part.strip()]
        if not statuses:
            return queryset
        return queryset.filter(status__in=statuses)
