from __future__ import annotations

import re
from collections.abc import Iterable

from .base import LockFile

# Gemfile.lock sections look like:
#
#   GEM
#     remote: https://rubygems.org/
#     specs:
#       actioncable (5.2.2)
#         actionpack (= 5.2.2)
#
# Only the four-space spec lines are gems; six-space lines are their requirements.
REMOTE_PREFIX = "  remote:"
SPECS_PREFIX = "  specs:"
DEPENDENCY_RE = re.compile(r"^\s{4}\S")


class GemfileLock(LockFile):
    def parse(self, lines: Iterable[str]) -> None:
        current_remote = ""
        reading_remote = False
        reading_specs = False

        for line in lines:
            if line.startswith(REMOTE_PREFIX):
                current_remote = line[len(REMOTE_PREFIX) :].strip()
                self.add_remote(current_remote)
                reading_remote = True
            elif reading_remote and line.startswith(SPECS_PREFIX):
                reading_specs = True
            elif reading_specs and DEPENDENCY_RE.match(line):
                self.add_dependency(current_remote, line.split()[0])
            elif line == "":
                reading_remote = False
                reading_specs = False
