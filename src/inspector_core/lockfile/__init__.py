"""Lockfile parsers and remote/mismatch analysis."""

from .analysis import (
    AnalysisResult,
    Ecosystem,
    analyze_dependencies,
    find_dependency_mismatches,
    list_remotes,
    resolve_ecosystem,
)
from .base import LockFile, Remote, find_lock_files
from .gemfile import GemfileLock
from .yarn import YarnLock

__all__ = [
    "AnalysisResult",
    "Ecosystem",
    "GemfileLock",
    "LockFile",
    "Remote",
    "YarnLock",
    "analyze_dependencies",
    "find_dependency_mismatches",
    "find_lock_files",
    "list_remotes",
    "resolve_ecosystem",
]
