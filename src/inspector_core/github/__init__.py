"""GitHub organization crawling."""

from .client import GitHubClient, GitHubError, NotFoundError, RateLimitError
from .crawler import CrawlAbortedError, CrawlStats, LockfileCrawler

__all__ = [
    "CrawlAbortedError",
    "CrawlStats",
    "GitHubClient",
    "GitHubError",
    "LockfileCrawler",
    "NotFoundError",
    "RateLimitError",
]
