"""Local storage for crawled lockfiles."""

from .lock_store import LockfileStore

__all__ = ["LockfileStore"]
