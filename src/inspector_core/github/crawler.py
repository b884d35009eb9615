from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import requests

from inspector_core.config import CrawlerConfig
from inspector_core.retry import RetryableError, RetryPolicy
from inspector_core.schemas import RepositoryRecord
from inspector_core.storage import LockfileStore

from .client import GitHubError, NotFoundError

logger = logging.getLogger(__name__)


class RepositorySource(Protocol):
    def list_org_repositories(
        self,
        organization: str,
        *,
        page: int,
        per_page: int = 30,
        public_only: bool = False,
    ) -> list[RepositoryRecord]:
        """Return one page of the organization's repositories."""

    def fetch_raw_file(self, full_name: str, path: str) -> bytes:
        """Return the raw bytes of `path` in repository `full_name`."""


class CrawlAbortedError(Exception):
    """The organization listing failed; the crawl cannot continue."""


@dataclass(slots=True)
class CrawlStats:
    pages: int = 0
    fetched: int = 0
    skipped_cached: int = 0
    skipped_archived: int = 0
    not_found: int = 0
    failed: int = 0
    rate_limited: int = 0


class LockfileCrawler:
    """Download one named file from every active repository of an organization.

    Repositories whose lockfile was stored by an earlier run are never fetched
    again, so repeated runs only fill in what is missing.
    """

    def __init__(
        self,
        *,
        config: CrawlerConfig,
        client: RepositorySource,
        store: LockfileStore | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self.config = config
        self.client = client
        self.store = store or LockfileStore(config.output_dir)
        self.retry_policy = retry_policy or RetryPolicy()

    def run(self) -> CrawlStats:
        stats = CrawlStats()
        page = 1
        while True:
            repositories = self._list_page(page)
            stats.pages += 1
            if not repositories:
                break

            for repository in repositories:
                if repository.archived:
                    stats.skipped_archived += 1
                    continue
                self.fetch_repository(repository, stats=stats)

            page += 1

        logger.info(
            (
                "crawl_stats org=%s pages=%d fetched=%d cached=%d archived=%d "
                "not_found=%d failed=%d rate_limited=%d"
            ),
            self.config.organization,
            stats.pages,
            stats.fetched,
            stats.skipped_cached,
            stats.skipped_archived,
            stats.not_found,
            stats.failed,
            stats.rate_limited,
        )
        return stats

    def fetch_repository(self, repository: RepositoryRecord, *, stats: CrawlStats) -> None:
        filename = self.config.filename
        key = repository.cache_key

        if self.store.exists(key):
            logger.info("%s already exists for %s", filename, repository.name)
            stats.skipped_cached += 1
            return

        def _on_rate_limited(error: RetryableError, delay: float) -> None:
            stats.rate_limited += 1
            logger.warning(
                "Rate limit exceeded. Sleeping for %s seconds. repo=%s error=%s",
                delay,
                repository.full_name,
                error,
            )

        try:
            content = self.retry_policy.call(
                lambda: self.client.fetch_raw_file(repository.full_name, filename),
                on_retry=_on_rate_limited,
            )
        except NotFoundError:
            logger.info("%s not found for %s", filename, repository.name)
            stats.not_found += 1
            return
        except (GitHubError, requests.RequestException):
            logger.exception("failed to fetch %s for %s", filename, repository.full_name)
            stats.failed += 1
            return

        try:
            self.store.write(key, content)
        except FileExistsError:
            logger.info("%s already exists for %s", filename, repository.name)
            stats.skipped_cached += 1
            return
        except OSError:
            logger.exception("failed to store %s for %s", filename, repository.full_name)
            stats.failed += 1
            return
        logger.info("Fetched %s for %s", filename, repository.name)
        stats.fetched += 1

    def _list_page(self, page: int) -> list[RepositoryRecord]:
        try:
            return self.client.list_org_repositories(
                self.config.organization,
                page=page,
                per_page=self.config.page_size,
                public_only=self.config.public_only,
            )
        except (GitHubError, requests.RequestException) as exc:
            logger.error(
                "repository listing failed org=%s page=%d error=%s",
                self.config.organization,
                page,
                exc,
            )
            raise CrawlAbortedError(str(exc)) from exc
