from django.contrib import admin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """
    Settlement receipts are written by the settlement engine only.
    """

    list_display = ("id", "total", "discount_amount", "tip_amount", "change_amount", "created_at")
    search_fields = ("id", "customer_name", "notes")
    readonly_fields = [field.name for field in Payment._meta.fields]

    def has_add_permission(self, request):
        return False
