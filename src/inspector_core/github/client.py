from __future__ import annotations

import logging
import time
from typing import Any
from urllib.parse import quote

import requests
from pydantic import ValidationError

from inspector_core.config import GITHUB_API_BASE
from inspector_core.retry import RetryableError
from inspector_core.schemas import RepositoryRecord

RAW_MEDIA_TYPE = "application/vnd.github.v3.raw"
JSON_MEDIA_TYPE = "application/vnd.github+json"

logger = logging.getLogger(__name__)


class GitHubError(Exception):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(GitHubError):
    pass


class RateLimitError(GitHubError, RetryableError):
    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        retry_after_seconds: float | None = None,
    ) -> None:
        GitHubError.__init__(self, message, status_code=status_code)
        self.retry_after_seconds = retry_after_seconds


class GitHubClient:
    """Minimal GitHub REST client for organization listings and raw contents."""

    def __init__(
        self,
        *,
        access_token: str,
        api_base_url: str = GITHUB_API_BASE,
        timeout_seconds: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        if not access_token.strip():
            raise ValueError("GitHub access token is empty.")
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0.")

        self.api_base_url = api_base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {access_token}"})
        self.session.headers.setdefault("User-Agent", "dependency-inspector/0.1.0")

    def list_org_repositories(
        self,
        organization: str,
        *,
        page: int,
        per_page: int = 30,
        public_only: bool = False,
    ) -> list[RepositoryRecord]:
        if page < 1:
            raise ValueError("page must be >= 1")

        params: dict[str, Any] = {"per_page": per_page, "page": page}
        if public_only:
            params["type"] = "public"

        response = self._get(
            f"/orgs/{quote(organization, safe='')}/repos",
            params=params,
            accept=JSON_MEDIA_TYPE,
        )
        payload = self._json(response)
        if not isinstance(payload, list):
            raise GitHubError("repository listing is not a JSON array.")

        try:
            return [RepositoryRecord.model_validate(item) for item in payload]
        except ValidationError as exc:
            raise GitHubError(f"repository listing has an invalid entry: {exc}") from exc

    def fetch_raw_file(self, full_name: str, path: str) -> bytes:
        response = self._get(
            f"/repos/{full_name}/contents/{quote(path.lstrip('/'))}",
            accept=RAW_MEDIA_TYPE,
        )
        return response.content

    def _get(
        self,
        path: str,
        *,
        accept: str,
        params: dict[str, Any] | None = None,
    ) -> requests.Response:
        response = self.session.get(
            f"{self.api_base_url}{path}",
            params=params,
            headers={"Accept": accept},
            timeout=self.timeout_seconds,
        )
        if response.status_code < 400:
            return response

        message = self._error_message(response)
        if self._is_rate_limited(response):
            raise RateLimitError(
                message,
                status_code=response.status_code,
                retry_after_seconds=self._retry_after_seconds(response),
            )
        if response.status_code == 404:
            raise NotFoundError(message, status_code=404)
        raise GitHubError(message, status_code=response.status_code)

    @staticmethod
    def _is_rate_limited(response: requests.Response) -> bool:
        if response.status_code == 429:
            return True
        if response.status_code != 403:
            return False
        if response.headers.get("Retry-After") is not None:
            return True
        if response.headers.get("X-RateLimit-Remaining") == "0":
            return True
        return "rate limit" in response.text.lower()

    @staticmethod
    def _retry_after_seconds(response: requests.Response) -> float | None:
        retry_after = response.headers.get("Retry-After")
        if retry_after is not None:
            try:
                return float(retry_after)
            except ValueError:
                logger.warning("unparseable Retry-After header value=%s", retry_after)

        reset_at = response.headers.get("X-RateLimit-Reset")
        if reset_at is not None:
            try:
                return max(0.0, float(reset_at) - time.time())
            except ValueError:
                logger.warning("unparseable X-RateLimit-Reset header value=%s", reset_at)
        return None

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and isinstance(payload.get("message"), str):
            return f"{response.status_code} {payload['message']}"
        return f"{response.status_code} {response.reason or 'error'}"

    @staticmethod
    def _json(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise GitHubError("GitHub response is not valid JSON.") from exc
