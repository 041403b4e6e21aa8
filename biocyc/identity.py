"""BioCyc object identifiers.

An identifier is a two-part key: the organism database (``orgid``, e.g.
``ECOLI``, ``META``) and the frame within it (``frameid``, e.g.
``ARGSYN-PWY``). Both parts are held in escaped form, with the literal ``+``
written as ``%2B``; the unescaped form is what appears in the ``orgid`` and
``frameid`` attributes of ptools-xml documents.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from biocyc.errors import InvalidIdentifier

if TYPE_CHECKING:
    from biocyc.cache import ObjectCache
    from biocyc.records import Entity

_TOKEN = r"(?:[A-Za-z0-9+-]|%[A-Fa-f0-9]{2})+"
ID_PATTERN = re.compile(rf"\A({_TOKEN}):({_TOKEN})\Z")


def escape(value: Any) -> str:
    """Escape ``+`` as ``%2B``."""
    return str(value).replace("+", "%2B")


def unescape(value: Any) -> str:
    """Undo :func:`escape` (either hex case)."""
    return re.sub(r"%2[Bb]", "+", str(value))


@dataclass(frozen=True)
class Identity:
    """A ``realm:frame`` key identifying one record in a BioCyc database."""

    realm: str
    frame: str

    def __post_init__(self) -> None:
        realm, frame = escape(unescape(self.realm)), escape(unescape(self.frame))
        if not realm or not frame:
            raise InvalidIdentifier(
                f"Invalid BioCyc object identifier {self.realm!r}:{self.frame!r}",
                f"{self.realm}:{self.frame}",
            )
        object.__setattr__(self, "realm", realm)
        object.__setattr__(self, "frame", frame)

    @classmethod
    def parse(cls, text: Any) -> Identity:
        """Build an identity from ``"ORGID:FRAMEID"`` text."""
        match = ID_PATTERN.match(str(text))
        if match is None:
            raise InvalidIdentifier(f"Invalid BioCyc object identifier {text!r}", text)
        return cls(match.group(1), match.group(2))

    def __str__(self) -> str:
        return f"{self.realm}:{self.frame}"

    @property
    def unescaped_realm(self) -> str:
        return unescape(self.realm)

    @property
    def unescaped_frame(self) -> str:
        return unescape(self.frame)

    def cache_key(self, detail: str | None = None) -> tuple[str, str, str | None]:
        return (self.realm, self.frame, detail)

    def resolve(self, detail: str | None = None, cache: ObjectCache | None = None) -> Entity:
        """Fetch (or return the cached) record for this identity.

        Raises :class:`~biocyc.errors.ObjectNotFound` when the fetched
        document holds no matching record.
        """
        if cache is None:
            from biocyc.cache import get_cache

            cache = get_cache()
        return cache.resolve(self, detail)
