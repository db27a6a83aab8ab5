from rest_framework import generics

from .models import Table
from .serializers import TableSerializer


class TableListView(generics.ListAPIView):
    serializer_class = TableSerializer
    pagination_class = None

    def get_queryset(self):
        return Table.objects.select_related("layout").order_by("table_number")


class LayoutTableListView(generics.ListAPIView):
    serializer_class = TableSerializer
    pagination_class = None

    def get_queryset(self):
        return (
            Table.objects.select_related("layout")
            .filter(layout_id=self.kwargs["layout_id"])
            .order_by("table_number")
        )
