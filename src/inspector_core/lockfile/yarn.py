from __future__ import annotations

from collections.abc import Iterable

from .base import LockFile

ENTRY_SUFFIX = ":"
RESOLVED_PREFIX = '  resolved "'
VERSION_SEPARATOR = "@"


def dependency_name(entry_line: str) -> str:
    """`"@babel/core@^7.0.0", "@babel/core@^7.1.0":` -> `@babel/core`."""
    spec = entry_line.lstrip('"')
    if spec.startswith(VERSION_SEPARATOR):
        return VERSION_SEPARATOR + spec[1:].split(VERSION_SEPARATOR, 1)[0]
    return spec.split(VERSION_SEPARATOR, 1)[0]


class YarnLock(LockFile):
    def parse(self, lines: Iterable[str]) -> None:
        current_dependency = ""
        reading_dependency = False

        for line in lines:
            if not reading_dependency and line.endswith(ENTRY_SUFFIX):
                current_dependency = dependency_name(line)
                reading_dependency = True
            elif reading_dependency and line.startswith(RESOLVED_PREFIX):
                resolved = line[len(RESOLVED_PREFIX) :]
                remote_url = resolved.split(f"/{current_dependency}/", 1)[0]
                self.add_dependency(remote_url, current_dependency)
            elif line == "":
                reading_dependency = False
