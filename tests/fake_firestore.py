# In-memory stand-in for the parts of the Firestore client the app uses.
import copy
import datetime
import uuid
from google.api_core.exceptions import NotFound
from firebase_admin import firestore


def _resolve(value, current):
    if isinstance(value, firestore.Increment):
        return (current or 0) + value.value
    if value is firestore.SERVER_TIMESTAMP:
        return datetime.datetime.now(datetime.timezone.utc)
    return value


def _matches(data, field, op, value):
    if field not in data:
        return False
    actual = data[field]
    try:
        if op == '==':
            return actual == value
        if op == '!=':
            return actual != value
        if op == '<':
            return actual < value
        if op == '<=':
            return actual <= value
        if op == '>':
            return actual > value
        if op == '>=':
            return actual >= value
        if op == 'in':
            return actual in value
        if op == 'array_contains':
            return value in (actual or [])
    except TypeError:
        return False
    raise ValueError(f"Unsupported operator {op}")


class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = copy.deepcopy(data)

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data)


class FakeDocumentReference:
    def __init__(self, docs, doc_id):
        self._docs = docs
        self.id = doc_id

    def get(self):
        return FakeSnapshot(self, self._docs.get(self.id))

    def set(self, data, merge=False):
        existing = self._docs.get(self.id, {}) if merge else {}
        updated = dict(existing)
        for key, value in data.items():
            updated[key] = _resolve(value, existing.get(key))
        self._docs[self.id] = updated

    def update(self, data):
        if self.id not in self._docs:
            raise NotFound(f"No document to update: {self.id}")
        existing = self._docs[self.id]
        for key, value in data.items():
            existing[key] = _resolve(value, existing.get(key))

    def delete(self):
        self._docs.pop(self.id, None)


class FakeQuery:
    def __init__(self, docs, filters=(), orders=(), limit=None):
        self._docs = docs
        self._filters = list(filters)
        self._orders = list(orders)
        self._limit = limit

    def where(self, field, op, value):
        return FakeQuery(self._docs, self._filters + [(field, op, value)], self._orders, self._limit)

    def order_by(self, field, direction="ASCENDING"):
        return FakeQuery(self._docs, self._filters, self._orders + [(field, direction)], self._limit)

    def limit(self, count):
        return FakeQuery(self._docs, self._filters, self._orders, count)

    def stream(self):
        results = [
            (doc_id, data) for doc_id, data in self._docs.items()
            if all(_matches(data, f, op, v) for f, op, v in self._filters)
        ]
        for field, direction in reversed(self._orders):
            results = [r for r in results if field in r[1]]
            results.sort(key=lambda r: r[1][field], reverse=direction == "DESCENDING")
        if self._limit is not None:
            results = results[:self._limit]
        for doc_id, data in results:
            yield FakeSnapshot(FakeDocumentReference(self._docs, doc_id), data)

    def get(self):
        return list(self.stream())


class FakeCollection(FakeQuery):
    def document(self, doc_id=None):
        return FakeDocumentReference(self._docs, doc_id or uuid.uuid4().hex)


class FakeFirestore:
    def __init__(self):
        self.collections = {}

    def collection(self, name):
        return FakeCollection(self.collections.setdefault(name, {}))

    def docs(self, name):
        """Raw stored documents of a collection, for assertions."""
        return self.collections.get(name, {})
