from django.contrib import admin

from .models import Order, OrderTable


class OrderTableInline(admin.TabularInline):
    model = OrderTable
    extra = 0


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("id", "menu_item", "status", "price", "created_at", "paid_at")
    list_filter = ("status",)
    search_fields = ("id", "notes", "menu_item__name")
    readonly_fields = (
        "created_at",
        "updated_at",
        "accepted_by",
        "accepted_at",
        "prepared_by",
        "prepared_at",
        "dispatched_by",
        "dispatched_at",
        "delivered_by",
        "delivered_at",
        "payment",
        "paid_at",
    )
    inlines = [OrderTableInline]
