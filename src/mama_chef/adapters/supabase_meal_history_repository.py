"""Supabase repository for the serialized meal history."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from mama_chef.services.meal_history import MealHistoryRepository


@dataclass
class SupabaseMealHistoryRepository(MealHistoryRepository):
    """Stores each namespace as one JSON row in ``kv_store``."""

    client: Client
    table: str = "kv_store"

    def load(self, namespace: str) -> list[dict[str, object]]:
        """Return the stored records for a namespace."""
        response = (
            self.client.table(self.table)
            .select("value")
            .eq("namespace", namespace)
            .limit(1)
            .execute()
        )
        if not response.data:
            return []
        value = response.data[0].get("value")
        return list(value) if isinstance(value, list) else []

    def save(self, namespace: str, records: list[dict[str, object]]) -> None:
        """Upsert the records for a namespace."""
        self.client.table(self.table).upsert(
            {
                "namespace": namespace,
                "value": records,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="namespace",
        ).execute()
