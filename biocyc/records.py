"""Record composition and the record-kind registry.

Every subclass of :class:`Record` is registered by name when its class body
is executed, and collects its :class:`~biocyc.fields.Field` declarations in
declaration order (inherited declarations first). ``parse`` runs those
declarations against an XML node to build a populated instance.
"""

from __future__ import annotations

import logging
from typing import Any

from biocyc.errors import ObjectInvalid, UnknownRecordKind
from biocyc.fields import Attr, Field, Reference
from biocyc.identity import Identity

logger = logging.getLogger(__name__)


class RecordRegistry:
    """Maps canonical kind names (``EnzymaticReaction``) to record classes."""

    def __init__(self) -> None:
        self._kinds: dict[str, type[Record]] = {}

    def register(self, cls: type[Record], name: str | None = None) -> type[Record]:
        name = name or cls.__name__
        if name in self._kinds and self._kinds[name] is not cls:
            logger.warning("Record kind %s re-registered by %s.%s", name, cls.__module__, cls.__qualname__)
        self._kinds[name] = cls
        return cls

    def lookup(self, name: str) -> type[Record]:
        try:
            return self._kinds[name]
        except KeyError:
            raise UnknownRecordKind(name) from None

    def kind_for_tag(self, tag: str) -> type[Record]:
        """Look up the record kind for a ptools-xml element name."""
        return self.lookup(self.normalize(tag))

    @staticmethod
    def normalize(tag: str) -> str:
        """``Enzymatic-Reaction`` -> ``EnzymaticReaction``."""
        name = tag.replace("-", "")
        return name[:1].upper() + name[1:]

    def names(self) -> list[str]:
        return sorted(self._kinds)

    def __contains__(self, name: object) -> bool:
        return name in self._kinds

    def __len__(self) -> int:
        return len(self._kinds)


registry = RecordRegistry()


class Record:
    """A record parsed from a ptools-xml node (no identity of its own)."""

    _fields: tuple[Field, ...] = ()

    def __init_subclass__(cls, kind: str | None = None, register: bool = True, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        own = [value for value in cls.__dict__.values() if isinstance(value, Field)]
        overridden = {field.name for field in own}
        cls._fields = tuple(field for field in cls._fields if field.name not in overridden) + tuple(own)
        if register:
            registry.register(cls, kind)

    def __init__(self) -> None:
        self._references: dict[str, Any] = {}

    @classmethod
    def fields(cls) -> tuple[Field, ...]:
        return cls._fields

    @classmethod
    def parse(cls, node: Any) -> Record:
        """Build a populated instance from *node*.

        Raises :class:`~biocyc.errors.ObjectInvalid` if a required field is
        missing; no partially populated instance escapes.
        """
        instance = cls._instantiate(node)
        for field in cls._fields:
            field.apply(instance, node)
        return instance

    @classmethod
    def _instantiate(cls, node: Any) -> Record:
        return cls()

    def to_dict(self) -> dict[str, Any]:
        """Populated fields as plain data; references are given as identity strings."""
        data: dict[str, Any] = {}
        for field in self._fields:
            if isinstance(field, Reference):
                data[field.name] = _plain(field.identities(self))
            elif isinstance(field, Attr):
                data[field.name] = _plain(getattr(self, field.name))
        return data

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


class Entity(Record, register=False):
    """A record with its own BioCyc identity (``orgid``/``frameid`` attributes)."""

    def __init__(self, identity: Identity, detail: str | None = None) -> None:
        super().__init__()
        self.identity = identity
        self.detail = detail

    @classmethod
    def _instantiate(cls, node: Any) -> Entity:
        orgid, frameid = node.get("orgid"), node.get("frameid")
        if not orgid or not frameid:
            raise ObjectInvalid(f"<{node.tag}> has no orgid/frameid", cls, "identity", node)
        return cls(Identity(orgid, frameid), node.get("detail"))

    @property
    def realm(self) -> str:
        return self.identity.realm

    @property
    def frame(self) -> str:
        return self.identity.frame

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": str(self.identity), "detail": self.detail}
        data.update(super().to_dict())
        return data

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.identity}>"


def _plain(value: Any) -> Any:
    if isinstance(value, list):
        return [_plain(item) for item in value]
    if isinstance(value, Record):
        return value.to_dict()
    if isinstance(value, Identity):
        return str(value)
    return value
