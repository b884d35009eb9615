from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from inspector_core.config import PrivateRegistry

from .base import LockFile
from .gemfile import GemfileLock
from .yarn import YarnLock

logger = logging.getLogger(__name__)

REMOTES_OUTPUT_FILE = "remotes.json"


class Ecosystem(StrEnum):
    RUBY = "ruby"
    JS = "js"


def build_lock_file(ecosystem: Ecosystem) -> LockFile:
    if ecosystem is Ecosystem.RUBY:
        return GemfileLock()
    return YarnLock()


def resolve_ecosystem(*, ruby: bool, js: bool) -> Ecosystem:
    if ruby and js:
        raise ValueError("a single language should be specified")
    if ruby:
        return Ecosystem.RUBY
    if js:
        return Ecosystem.JS
    raise ValueError("no language specified")


@dataclass(slots=True)
class AnalysisResult:
    parsed: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    mismatches: dict[Path, dict[str, list[str]]] = field(default_factory=dict)
    written: list[Path] = field(default_factory=list)


def load_lock_file(path: Path, ecosystem: Ecosystem, *, verbose: bool = False) -> LockFile:
    lock_file = build_lock_file(ecosystem)
    lock_file.parse_file(path)
    if verbose:
        logger.info("remotes path=%s\n%s", path, lock_file.describe())
    return lock_file


def list_remotes(
    paths: Iterable[Path],
    *,
    ecosystem: Ecosystem,
    output_dir: Path,
    grep: str = "",
    verbose: bool = False,
) -> tuple[list[str], Path]:
    matched: set[str] = set()
    for path in paths:
        logger.info("parsing lockfile path=%s", path)
        try:
            lock_file = load_lock_file(path, ecosystem, verbose=verbose)
        except (OSError, UnicodeDecodeError):
            logger.exception("failed to read lockfile, skipping path=%s", path)
            continue
        matched.update(lock_file.match_remote_urls(grep))

    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / REMOTES_OUTPUT_FILE
    remote_urls = sorted(matched)
    output_path.write_text(json.dumps(remote_urls, indent=2), encoding="utf-8")
    return remote_urls, output_path


def find_dependency_mismatches(
    registry: PrivateRegistry, lock_file: LockFile
) -> dict[str, list[str]]:
    """Group registry dependencies that were resolved from another remote by that remote.

    With a registry at https://packages.acme.io/ listing `active_kafka`, a lockfile
    that resolved `active_kafka` from https://rubygems.org/ yields
    `{"https://rubygems.org/": ["active_kafka"]}`.
    """
    mismatches: dict[str, list[str]] = {}
    for dependency in registry.dependencies:
        for remote_url in lock_file.mismatched_remote_urls(registry.url, dependency):
            mismatches.setdefault(remote_url, []).append(dependency)
    return mismatches


def analyze_dependencies(
    paths: Iterable[Path],
    *,
    registry: PrivateRegistry,
    ecosystem: Ecosystem,
    output_dir: Path,
    verbose: bool = False,
) -> AnalysisResult:
    result = AnalysisResult()
    output_dir.mkdir(parents=True, exist_ok=True)

    for path in paths:
        try:
            lock_file = load_lock_file(path, ecosystem, verbose=verbose)
        except (OSError, UnicodeDecodeError):
            logger.exception("failed to read lockfile, skipping path=%s", path)
            result.skipped.append(path)
            continue
        result.parsed.append(path)

        mismatches = find_dependency_mismatches(registry, lock_file)
        if not mismatches:
            continue

        result.mismatches[path] = mismatches
        output_path = output_dir / f"{path.name.removesuffix('.lock')}_output.json"
        output_path.write_text(json.dumps(mismatches, indent=2), encoding="utf-8")
        result.written.append(output_path)

    return result
