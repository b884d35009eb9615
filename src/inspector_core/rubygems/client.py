from __future__ import annotations

import logging
from urllib.parse import quote

import requests

from inspector_core.config import RUBYGEMS_API_BASE
from inspector_core.schemas import LookupStatus, RegistryLookup

logger = logging.getLogger(__name__)


class RubyGemsClient:
    """Look up gem metadata on rubygems.org, one request per gem."""

    def __init__(
        self,
        *,
        api_base_url: str = RUBYGEMS_API_BASE,
        timeout_seconds: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0.")

        self.api_base_url = api_base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    def lookup(self, name: str) -> RegistryLookup:
        url = f"{self.api_base_url}/{quote(name, safe='')}.json"
        try:
            response = self.session.get(url, timeout=self.timeout_seconds)
        except requests.RequestException:
            logger.exception("rubygems request failed gem=%s", name)
            return RegistryLookup(status=LookupStatus.NOT_FOUND, name=name)

        if not response.ok:
            return RegistryLookup(status=LookupStatus.NOT_FOUND, name=name)

        try:
            payload = response.json()
        except ValueError:
            return RegistryLookup(status=LookupStatus.PARSE_ERROR, name=name)
        if not isinstance(payload, dict):
            return RegistryLookup(status=LookupStatus.PARSE_ERROR, name=name)

        authors = payload.get("authors")
        return RegistryLookup(
            status=LookupStatus.OK,
            name=name,
            authors="" if authors is None else str(authors),
        )
