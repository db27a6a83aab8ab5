import logging

from core_backend.exceptions import NotFoundError
from .models import Table

logger = logging.getLogger(__name__)


class TableService:
    """Read queries and occupancy bookkeeping for floor tables."""

    @staticmethod
    def get_tables(table_ids) -> list:
        """
        Resolves every id or raises NotFoundError naming the first missing one.
        Returned in the order the ids were given.
        """
        wanted = list(dict.fromkeys(table_ids))
        found = {table.id: table for table in Table.objects.filter(pk__in=wanted)}
        missing = [table_id for table_id in wanted if table_id not in found]
        if missing:
            raise NotFoundError(
                f"Table {missing[0]} not found.",
                code="table_not_found",
                details={"table_ids": [str(table_id) for table_id in missing]},
            )
        return [found[table_id] for table_id in wanted]

    @staticmethod
    def recompute_occupancy(table_ids) -> list:
        """
        Restores the occupancy invariant for the given tables: a table is
        occupied exactly while at least one unpaid order references it.

        Must run inside a transaction. Returns the tables whose status
        actually changed.
        """
        from orders.models import Order

        changed = []
        tables = (
            Table.objects.select_for_update()
            .filter(pk__in=set(table_ids))
            .order_by("pk")
        )
        for table in tables:
            has_unpaid = (
                Order.objects.filter(tables=table)
                .exclude(status=Order.Status.PAID)
                .exists()
            )
            target = Table.Status.OCCUPIED if has_unpaid else Table.Status.FREE
            if table.status != target:
                logger.info(f"Table {table.table_number} ({table.id}): {table.status} -> {target}")
                table.status = target
                table.save(update_fields=["status", "updated_at"])
                changed.append(table)
        return changed
