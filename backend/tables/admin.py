from django.contrib import admin

from .models import Layout, Table


class TableInline(admin.TabularInline):
    model = Table
    extra = 0
    fields = ("table_number", "seats", "status")


@admin.register(Layout)
class LayoutAdmin(admin.ModelAdmin):
    list_display = ("name", "updated_at")
    inlines = [TableInline]


@admin.register(Table)
class TableAdmin(admin.ModelAdmin):
    list_display = ("table_number", "layout", "seats", "status")
    list_filter = ("layout", "status")
