"""Common utilities for tests."""

import unittest.mock
from typing import Any, Optional

from mockfirestore import CollectionReference, MockFirestore, Query
from mockfirestore.document import DocumentReference


def patch_mockfirestore() -> None:
    """Apply monkeypatches to mockfirestore to support FieldFilter and equality."""

    def collection_where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:  # noqa: E501
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(CollectionReference, "_where"):
        CollectionReference._where = CollectionReference.where
        CollectionReference.where = collection_where

    def query_where(
        self: Any,
        field_path: Optional[str] = None,
        op_string: Optional[str] = None,
        value: Any = None,
        filter: Any = None,
    ) -> Any:
        if filter:
            return self._where(filter.field_path, filter.op_string, filter.value)
        return self._where(field_path, op_string, value)

    if not hasattr(Query, "_where"):
        Query._where = Query.where
        Query.where = query_where

    def doc_ref_eq(self: Any, other: Any) -> bool:
        if not isinstance(other, DocumentReference):
            return False
        return self._path == other._path

    if not hasattr(DocumentReference, "_orig_eq"):
        DocumentReference._orig_eq = DocumentReference.__eq__
        DocumentReference.__eq__ = doc_ref_eq


class MockBatch:
    """A write batch that applies its writes to mockfirestore on commit."""

    def __init__(self, db: Any) -> None:
        self.db = db
        self.writes: list[tuple[Any, Any]] = []
        self.commit = unittest.mock.MagicMock(side_effect=self._real_commit)

    def set(self, ref: Any, data: Any, merge: bool = False) -> None:
        self.writes.append((ref, data))

    def delete(self, ref: Any) -> None:
        self.writes.append((ref, "DELETE"))

    def _real_commit(self) -> list[Any]:
        results = []
        for ref, data in self.writes:
            if data == "DELETE":
                ref.delete()
            else:
                ref.set(data)
            results.append(unittest.mock.MagicMock(name="WriteResult"))
        return results


def make_mock_db() -> MockFirestore:
    """Create a patched MockFirestore whose batch() returns a fresh MockBatch."""
    patch_mockfirestore()
    db = MockFirestore()
    db.batches = []

    def new_batch() -> MockBatch:
        batch = MockBatch(db)
        db.batches.append(batch)
        return batch

    db.batch = unittest.mock.MagicMock(side_effect=new_batch)
    return db
