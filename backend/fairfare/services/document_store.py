"""
Remote document store backed by SQLAlchemy.

Exposes collection-of-documents operations over the "trips" and "expenses"
collections plus live queries: a listener gets the current result set right
away and again after every write that touches a matching document.
Documents are plain dicts.
"""
import logging
from typing import Any, Callable, Dict, List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from fairfare.db.base import generate_id
from fairfare.models.trip import Trip
from fairfare.models.expense import Expense

logger = logging.getLogger(__name__)

COLLECTIONS = {
    "trips": Trip,
    "expenses": Expense,
}

Document = Dict[str, Any]
SnapshotCallback = Callable[[List[Document]], None]
ErrorCallback = Callable[[Exception], None]


class DocumentNotFoundError(LookupError):
    """Raised when updating a document that does not exist."""


class _Listener:
    """A live query registration."""

    def __init__(self, collection: str, field: str, value: Any, order_by: str,
                 on_snapshot: SnapshotCallback, on_error: ErrorCallback):
        self.collection = collection
        self.field = field
        self.value = value
        self.order_by = order_by
        self.on_snapshot = on_snapshot
        self.on_error = on_error
        self.active = True


class DocumentStore:
    """Collection-of-documents facade with live queries."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory
        self._listeners: Dict[str, List[_Listener]] = {}

    @staticmethod
    def _model(collection: str):
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise ValueError(f"Unknown collection: {collection}")

    @staticmethod
    def _column(model, field: str):
        column = getattr(model, field, None)
        if column is None:
            raise ValueError(f"Unknown field {field} on {model.__tablename__}")
        return column

    @staticmethod
    def _to_document(row) -> Document:
        return {c.name: getattr(row, c.name) for c in row.__table__.columns}

    def add(self, collection: str, data: Document) -> str:
        """Create a document with a generated id."""
        model = self._model(collection)
        fields = {k: v for k, v in data.items() if k != "id"}
        with self._session_factory() as db:
            row = model(id=generate_id(), **fields)
            db.add(row)
            db.commit()
            db.refresh(row)
            document = self._to_document(row)
        self._notify(collection, document)
        return document["id"]

    def set(self, collection: str, doc_id: str, data: Document):
        """Create or overwrite the document with an explicit id."""
        model = self._model(collection)
        fields = {k: v for k, v in data.items() if k != "id"}
        with self._session_factory() as db:
            row = db.get(model, doc_id)
            if row is None:
                row = model(id=doc_id, **fields)
                db.add(row)
            else:
                for key, value in fields.items():
                    setattr(row, key, value)
            db.commit()
            db.refresh(row)
            document = self._to_document(row)
        self._notify(collection, document)

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        """Read a document by id."""
        model = self._model(collection)
        with self._session_factory() as db:
            row = db.get(model, doc_id)
            return self._to_document(row) if row else None

    def where(self, collection: str, field: str, value: Any,
              order_by: str = "created_at", descending: bool = True) -> List[Document]:
        """Documents whose field equals value, ordered by order_by."""
        model = self._model(collection)
        column = self._column(model, field)
        order_column = self._column(model, order_by)
        ordering = order_column.desc() if descending else order_column.asc()
        with self._session_factory() as db:
            rows = db.query(model).filter(column == value).order_by(ordering, model.id).all()
            return [self._to_document(row) for row in rows]

    def update(self, collection: str, doc_id: str, fields: Document):
        """Update some fields of an existing document."""
        model = self._model(collection)
        with self._session_factory() as db:
            row = db.get(model, doc_id)
            if row is None:
                raise DocumentNotFoundError(f"{collection}/{doc_id} not found")
            for key, value in fields.items():
                if key != "id":
                    setattr(row, key, value)
            db.commit()
            db.refresh(row)
            document = self._to_document(row)
        self._notify(collection, document)

    def delete(self, collection: str, doc_id: str):
        """Delete a document by id; deleting a missing document is a no-op."""
        model = self._model(collection)
        with self._session_factory() as db:
            row = db.get(model, doc_id)
            if row is None:
                return
            document = self._to_document(row)
            db.delete(row)
            db.commit()
        self._notify(collection, document)

    def listen(self, collection: str, field: str, value: Any,
               on_snapshot: SnapshotCallback, on_error: ErrorCallback,
               order_by: str = "created_at") -> Callable[[], None]:
        """
        Subscribe to a field-equality query.

        The current result set is delivered before this returns; later
        snapshots follow each matching write. Returns an unsubscribe callable.
        """
        self._column(self._model(collection), field)
        listener = _Listener(collection, field, value, order_by, on_snapshot, on_error)
        self._listeners.setdefault(collection, []).append(listener)
        self._deliver(listener)

        def unsubscribe():
            listener.active = False
            listeners = self._listeners.get(collection, [])
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    def _deliver(self, listener: _Listener):
        if not listener.active:
            return
        try:
            documents = self.where(listener.collection, listener.field, listener.value,
                                   order_by=listener.order_by)
        except SQLAlchemyError as e:
            logger.error(f"Live query on {listener.collection} failed: {e}")
            listener.on_error(e)
            return
        listener.on_snapshot(documents)

    def _notify(self, collection: str, document: Document):
        for listener in list(self._listeners.get(collection, [])):
            if document.get(listener.field) == listener.value:
                self._deliver(listener)
