"""Core module for the LEMS application."""

from .types import FirestoreDocument

__all__ = ["FirestoreDocument"]
