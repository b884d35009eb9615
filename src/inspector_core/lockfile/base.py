from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

LOCK_SUFFIX = ".lock"


@dataclass(slots=True)
class Remote:
    url: str
    dependencies: set[str] = field(default_factory=set)

    def has_dependency(self, name: str) -> bool:
        return name in self.dependencies


class LockFile(ABC):
    """Remotes and the dependencies resolved from each, parsed from a lockfile."""

    def __init__(self) -> None:
        self.remotes: dict[str, Remote] = {}

    @abstractmethod
    def parse(self, lines: Iterable[str]) -> None:
        """Populate `remotes` from the lockfile's lines."""

    def parse_file(self, path: str | Path) -> None:
        with Path(path).open(encoding="utf-8") as handle:
            self.parse(line.rstrip("\r\n") for line in handle)

    def add_remote(self, url: str) -> Remote:
        return self.remotes.setdefault(url, Remote(url=url))

    def add_dependency(self, remote_url: str, name: str) -> None:
        self.add_remote(remote_url).dependencies.add(name)

    def match_remote_urls(self, grep: str = "") -> list[str]:
        if not grep:
            return list(self.remotes)
        needle = grep.lower()
        return [url for url in self.remotes if needle in url.lower()]

    def mismatched_remote_urls(self, registry_url: str, dependency: str) -> list[str]:
        return [
            url
            for url, remote in self.remotes.items()
            if url != registry_url and remote.has_dependency(dependency)
        ]

    def describe(self) -> str:
        blocks = []
        for url, remote in self.remotes.items():
            blocks.append(f"{url}\n  {', '.join(sorted(remote.dependencies))}\n--------------------")
        return "\n".join(blocks)


def find_lock_files(path: str | Path) -> list[Path]:
    target = Path(path)
    if target.is_dir():
        return sorted(
            entry
            for entry in target.iterdir()
            if not entry.is_dir() and entry.name.endswith(LOCK_SUFFIX)
        )
    if not target.exists():
        raise FileNotFoundError(f"No such file or directory: {target}")
    if not target.name.endswith(LOCK_SUFFIX):
        raise ValueError("provided file is not a .lock file")
    return [target]
