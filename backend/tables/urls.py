from django.urls import path

from .views import LayoutTableListView, TableListView

app_name = "tables"

urlpatterns = [
    path("", TableListView.as_view(), name="table-list"),
    path("layout/<uuid:layout_id>/", LayoutTableListView.as_view(), name="layout-table-list"),
]
