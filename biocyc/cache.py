"""Dereferencing cache for BioCyc records.

Maps ``(realm, frame, detail)`` to the record materialized for that key.
Entries are never evicted or replaced: the record graph is cyclic, and every
incoming reference to an identity must see the same instance.

Thread Safety
-------------
A single ``threading.Lock`` guards the entry and in-flight tables; fetches
run outside it. Concurrent misses on one key share a single fetch through a
per-key ``concurrent.futures.Future``, so at most one request per key is ever
in flight and misses on other keys never wait on it. Failed fetches are not
cached; waiters receive the same exception.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any, Callable

from biocyc.errors import ObjectNotFound
from biocyc.identity import Identity
from biocyc.records import Entity, RecordRegistry, registry as default_registry

logger = logging.getLogger(__name__)

CacheKey = tuple[str, str, "str | None"]
Fetcher = Callable[[str, str, "str | None"], Any]

_ERROR_TAG = "Error"
_MATCH_XPATH = "/ptools-xml/*[@orgid = $orgid and @frameid = $frameid and local-name() != $error][1]"


@dataclass
class _Flight:
    owner: int
    future: Future = field(default_factory=Future)


class ObjectCache:
    """Fetch-once, keep-forever store of materialized records.

    Parameters
    ----------
    fetch : callable ``(orgid, frameid, detail) -> lxml element`` returning
        the ptools-xml document for a key. Defaults to
        :func:`biocyc.web_services.getxml`.
    registry : record-kind registry used to dispatch fetched elements.
    """

    def __init__(self, fetch: Fetcher | None = None, registry: RecordRegistry | None = None) -> None:
        if fetch is None:
            from biocyc.web_services import getxml

            fetch = getxml
        self._fetch = fetch
        self._registry = registry or default_registry
        self._objects: dict[CacheKey, Entity] = {}
        self._in_flight: dict[CacheKey, _Flight] = {}
        self._lock = threading.Lock()
        self.fetch_count = 0

    def resolve(self, identity: Identity, detail: str | None = None) -> Entity:
        """Return the record for *identity*, fetching it on first use.

        Raises :class:`~biocyc.errors.ObjectNotFound` if the fetched document
        has no matching record; transport errors propagate unchanged.
        """
        key = identity.cache_key(detail)
        with self._lock:
            cached = self._objects.get(key)
            if cached is not None:
                return cached
            flight = self._in_flight.get(key)
            leader = flight is None
            if leader:
                flight = _Flight(owner=threading.get_ident())
                self._in_flight[key] = flight

        if not leader:
            if flight.owner == threading.get_ident():
                raise RuntimeError(f"Re-entrant resolve of {identity} while it is being fetched")
            logger.debug("Waiting on in-flight fetch of %s (detail=%s)", identity, detail)
            return flight.future.result()

        try:
            record = self._load(identity, detail)
        except BaseException as exc:
            # waiters must never be left blocked
            with self._lock:
                del self._in_flight[key]
            flight.future.set_exception(exc)
            raise

        with self._lock:
            self._objects[key] = record
            del self._in_flight[key]
        flight.future.set_result(record)
        return record

    def _load(self, identity: Identity, detail: str | None) -> Entity:
        orgid, frameid = identity.unescaped_realm, identity.unescaped_frame
        logger.debug("Fetching %s (detail=%s)", identity, detail)
        with self._lock:
            self.fetch_count += 1
        document = self._fetch(orgid, frameid, detail)

        matches = document.xpath(_MATCH_XPATH, orgid=orgid, frameid=frameid, error=_ERROR_TAG)
        if not matches:
            suffix = "" if detail is None else f" ({detail!r})"
            raise ObjectNotFound(f"BioCyc object not found {identity}{suffix}", identity, detail)

        node = matches[0]
        kind = self._registry.kind_for_tag(node.tag)
        record = kind.parse(node)
        logger.debug("Materialized %s as %s", identity, kind.__name__)
        return record

    def get(self, identity: Identity, detail: str | None = None) -> Entity | None:
        """Return the cached record without fetching."""
        with self._lock:
            return self._objects.get(identity.cache_key(detail))

    def contains(self, identity: Identity, detail: str | None = None) -> bool:
        with self._lock:
            return identity.cache_key(detail) in self._objects

    def __contains__(self, identity: object) -> bool:
        return isinstance(identity, Identity) and self.contains(identity)

    def __len__(self) -> int:
        with self._lock:
            return len(self._objects)

    def clear(self) -> None:
        """Drop every entry. Records already handed out keep their resolved references."""
        with self._lock:
            self._objects.clear()


_cache: ObjectCache | None = None
_cache_lock = threading.Lock()


def get_cache() -> ObjectCache:
    """Return the process-wide cache, creating it on first use."""
    global _cache
    if _cache is None:
        with _cache_lock:
            if _cache is None:
                _cache = ObjectCache()
    return _cache


def set_cache(cache: ObjectCache | None) -> ObjectCache | None:
    """Install *cache* as the process-wide cache and return the previous one."""
    global _cache
    with _cache_lock:
        previous, _cache = _cache, cache
    return previous
