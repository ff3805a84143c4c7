"""Core data types for the LEMS application."""

from typing import TypedDict


class FirestoreDocument(TypedDict, total=False):
    """Generic Firestore document structure."""

    id: str
