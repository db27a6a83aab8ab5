from rest_framework import serializers

from .models import Layout, Table


class TableSerializer(serializers.ModelSerializer):
    layout_id = serializers.UUIDField(read_only=True)
    layout_name = serializers.CharField(source="layout.name", read_only=True)

    class Meta:
        model = Table
        fields = [
            "id",
            "layout_id",
            "layout_name",
            "table_number",
            "seats",
            "status",
            "updated_at",
        ]
        read_only_fields = fields


class LayoutSerializer(serializers.ModelSerializer):
    class Meta:
        model = Layout
        fields = ["id", "name", "updated_at"]
        read_only_fields = fields
