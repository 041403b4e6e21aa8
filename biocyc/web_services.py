"""Thin wrapper for the BioCyc web services.

Fetches gzip-compressed ptools-xml documents and atom-mapping files. The
client uses configurable timeouts and retry logic; tests patch
``httpx.get`` so no real HTTP calls are made.

Docs: https://biocyc.org/web-services.shtml
"""

from __future__ import annotations

import gzip
import logging
import threading
import time
from typing import Any

import httpx
from lxml import etree

from biocyc import atom_mappings
from biocyc.settings import get_settings

logger = logging.getLogger(__name__)

_GZIP_MAGIC = b"\x1f\x8b"


def _decompress(content: bytes) -> bytes:
    """Gunzip bodies the server sent without a Content-Encoding header."""
    if content[:2] == _GZIP_MAGIC:
        return gzip.decompress(content)
    return content


def parse_xml(content: bytes) -> etree._Element:
    """Parse a ptools-xml document, refusing entity expansion and network access."""
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    return etree.fromstring(content, parser=parser)


class BioCycClient:
    """Client for the BioCyc Pathway Tools web services."""

    def __init__(
        self,
        base_url: str | None = None,
        atom_mappings_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        retry_delay: float | None = None,
    ) -> None:
        settings = get_settings()
        self.base_url = (base_url or settings.base_url).rstrip("/")
        self.atom_mappings_url = (atom_mappings_url or settings.atom_mappings_url).rstrip("/")
        self.timeout = settings.timeout if timeout is None else timeout
        self.max_retries = settings.max_retries if max_retries is None else max_retries
        self.retry_delay = settings.retry_delay if retry_delay is None else retry_delay

    def _get(self, url: str, params: dict[str, Any] | None = None) -> bytes:
        """Issue a GET request with retry logic and return the decompressed body."""
        last_exc: Exception | None = None

        for attempt in range(self.max_retries):
            try:
                resp = httpx.get(url, params=params, timeout=self.timeout)
                resp.raise_for_status()
                return _decompress(resp.content)
            except (httpx.HTTPStatusError, httpx.RequestError) as exc:
                last_exc = exc
                logger.warning(
                    "Request to %s failed (attempt %d/%d): %s",
                    url, attempt + 1, self.max_retries, exc,
                )
                if attempt < self.max_retries - 1:
                    time.sleep(self.retry_delay * (attempt + 1))

        raise ConnectionError(
            f"Failed to reach {url} after {self.max_retries} attempts"
        ) from last_exc

    def _get_xml(self, path: str, params: dict[str, Any]) -> etree._Element:
        content = self._get(f"{self.base_url}/{path}", params=params)
        return parse_xml(content)

    def getxml(self, orgid: str, frameid: str, detail: str | None = None) -> etree._Element:
        """Retrieve one object by ``orgid:frameid``.

        ``detail`` is ``none``, ``low`` or ``full``; the server default is
        used when omitted.
        """
        params: dict[str, Any] = {"id": f"{orgid}:{frameid}"}
        if detail is not None:
            params["detail"] = detail
        return self._get_xml("getxml", params)

    def apixml(self, function: str, orgid: str, frameid: str, detail: str | None = None) -> etree._Element:
        """Retrieve the objects returned by a Pathway Tools API function."""
        params: dict[str, Any] = {"fn": function, "id": f"{orgid}:{frameid}"}
        if detail is not None:
            params["detail"] = detail
        return self._get_xml("apixml", params)

    def xmlquery(self, query: str, detail: str | None = None) -> etree._Element:
        """Retrieve the objects returned by a BioVelo query."""
        params: dict[str, Any] = {"query": query}
        if detail is not None:
            params["detail"] = detail
        return self._get_xml("xmlquery", params)

    def download_atom_mappings(self, orgid: str, frameid: str) -> list[dict[str, str]]:
        """Download and decode the atom mappings of a reaction."""
        content = self._get(
            f"{self.atom_mappings_url}/{orgid}/download-atom-mappings",
            params={"object": frameid},
        )
        return atom_mappings.parse(content.decode("utf-8"))


_client: BioCycClient | None = None
_client_lock = threading.Lock()


def get_client() -> BioCycClient:
    """Return the shared client built from the current settings."""
    global _client
    if _client is None:
        with _client_lock:
            if _client is None:
                _client = BioCycClient()
    return _client


def reset_client() -> None:
    """Drop the shared client so the next call picks up reloaded settings."""
    global _client
    with _client_lock:
        _client = None


def getxml(orgid: str, frameid: str, detail: str | None = None) -> etree._Element:
    return get_client().getxml(orgid, frameid, detail)


def download_atom_mappings(orgid: str, frameid: str) -> list[dict[str, str]]:
    return get_client().download_atom_mappings(orgid, frameid)
