"""In-process meal history storage used when Supabase is not configured."""

import json
from dataclasses import dataclass, field

from mama_chef.services.meal_history import MealHistoryRepository


@dataclass
class InMemoryMealHistoryRepository(MealHistoryRepository):
    """Keeps serialized JSON strings per namespace, like browser storage."""

    values: dict[str, str] = field(default_factory=dict)

    def load(self, namespace: str) -> list[dict[str, object]]:
        """Return the decoded records for a namespace."""
        raw = self.values.get(namespace)
        if raw is None:
            return []
        return json.loads(raw)

    def save(self, namespace: str, records: list[dict[str, object]]) -> None:
        """Serialize and store the records for a namespace."""
        self.values[namespace] = json.dumps(records, ensure_ascii=False)
