"""
Remote feed adapter for a trip's expenses.
"""
from typing import Callable, List
from fairfare.schemas.expense import ExpenseRecord
from fairfare.services.document_store import DocumentStore

ExpenseSnapshotCallback = Callable[[List[ExpenseRecord]], None]


class RemoteFeedAdapter:
    """Live expense snapshots and expense writes for one store."""

    def __init__(self, store: DocumentStore):
        self._store = store

    def subscribe(self, trip_id: str, on_snapshot: ExpenseSnapshotCallback,
                  on_error: Callable[[Exception], None]) -> Callable[[], None]:
        """Deliver the trip's expenses (newest first) now and after each change."""
        def deliver(documents):
            on_snapshot([ExpenseRecord.model_validate(d) for d in documents])

        return self._store.listen("expenses", "trip_id", trip_id, deliver, on_error)

    async def write(self, trip_id: str, expense: ExpenseRecord) -> str:
        """Store an expense; the store assigns its own id and timestamp."""
        return self._store.add("expenses", {
            "trip_id": trip_id,
            "name": expense.name,
            "cost": expense.cost,
            "location": expense.location,
        })
