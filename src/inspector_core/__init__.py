"""Dependency inspector core package."""

from .config import AuditorConfig, CrawlerConfig, PrivateRegistry, load_registry
from .schemas import LookupStatus, RegistryLookup, RepositoryRecord

__all__ = [
    "AuditorConfig",
    "CrawlerConfig",
    "LookupStatus",
    "PrivateRegistry",
    "RegistryLookup",
    "RepositoryRecord",
    "load_registry",
]
