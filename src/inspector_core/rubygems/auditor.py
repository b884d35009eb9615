from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Protocol

from inspector_core.config import AuditorConfig
from inspector_core.schemas import LookupStatus, RegistryLookup

logger = logging.getLogger(__name__)


class RegistryLookupClient(Protocol):
    def lookup(self, name: str) -> RegistryLookup:
        """Return the registry outcome for one dependency name."""


@dataclass(slots=True)
class AuditReport:
    author_pattern: str
    registered: dict[str, str] = field(default_factory=dict)
    missing: list[str] = field(default_factory=list)
    parse_errors: list[str] = field(default_factory=list)

    def is_org_author(self, authors: str) -> bool:
        return re.search(self.author_pattern, authors.casefold(), re.IGNORECASE) is not None

    @property
    def org(self) -> list[str]:
        return [name for name, authors in self.registered.items() if self.is_org_author(authors)]

    @property
    def other(self) -> list[str]:
        return [
            name for name, authors in self.registered.items() if not self.is_org_author(authors)
        ]

    @property
    def org_authors(self) -> list[str]:
        seen: list[str] = []
        for name in self.org:
            authors = self.registered[name]
            if authors not in seen:
                seen.append(authors)
        return seen

    def summary_lines(self) -> list[str]:
        return [
            "Gems in our private registry that are claimed by us in rubygems.org: "
            f"{len(self.org)}",
            "Gems in our private registry that are NOT claimed by us in rubygems.org: "
            f"{len(self.other)}",
            "Gems in our private registry that are missing in rubygems.org: "
            f"{len(self.missing)}",
            "Different kinds of authors from our organization in rubygems.org: "
            f"{self.org_authors}",
            "Gems whose rubygems.org metadata could not be parsed: "
            f"{len(self.parse_errors)}",
        ]


class RegistryAuditor:
    def __init__(
        self,
        *,
        config: AuditorConfig,
        client: RegistryLookupClient,
        progress: Callable[[str], None] | None = None,
    ) -> None:
        self.config = config
        self.client = client
        self.progress = progress

    def audit(self, names: Iterable[str]) -> AuditReport:
        report = AuditReport(author_pattern=self.config.author_pattern)
        for name in names:
            if self.progress is not None:
                self.progress(f"Checking {name}...")

            result = self.client.lookup(name)
            if result.status is LookupStatus.OK:
                report.registered[result.name] = result.authors or ""
            elif result.status is LookupStatus.NOT_FOUND:
                report.missing.append(result.name)
            else:
                logger.warning("Error parsing JSON for %s", result.name)
                report.parse_errors.append(result.name)

        logger.info(
            "audit_stats org=%d other=%d missing=%d parse_errors=%d",
            len(report.org),
            len(report.other),
            len(report.missing),
            len(report.parse_errors),
        )
        return report
