"""Core module for the sinuca application."""

from .types import APIResponse, FirestoreDocument

__all__ = ["FirestoreDocument", "APIResponse"]
