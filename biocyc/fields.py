"""Declarative field processors for record kinds.

Record classes declare their fields in the class body::

    class Publication(Entity):
        title = Attr("title[@datatype = 'string']/text()")
        year = Attr("year[@datatype = 'integer']/text()", kind="integer")
        cited_by = Reference("cited-by/Publication", collection=True)

``Attr`` reads scalar or nested values from the record's XML node.
``Reference`` reads ``orgid``/``frameid`` pairs and keeps them as
:class:`~biocyc.identity.Identity` values until the field is read, at which
point the identities are resolved through the object cache. Every
``Reference`` also installs a raw-identity view named ``<name>_id`` (or
``<name>_ids`` for collections) on the record class.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from lxml import etree

from biocyc import types
from biocyc.errors import ObjectInvalid
from biocyc.identity import Identity

if TYPE_CHECKING:
    from biocyc.records import Record

_MISSING = object()


def _model_name(model: type | None) -> str:
    return model.__name__ if model is not None else "record"


class Field:
    """Base class for field declarations.

    Attributes:
        xpath: Selector evaluated against the record's node; ``None`` or
            empty selects the node itself
        collection: Keep every match (in document order) instead of the first
        null: Allow zero matches; when False a missing value raises
            :class:`~biocyc.errors.ObjectInvalid`
    """

    def __init__(self, xpath: str | None = None, *, collection: bool = False, null: bool = True) -> None:
        self.xpath = xpath
        self.collection = collection
        self.null = null
        self.owner: type | None = None
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.owner = owner
        self.name = name

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, xpath={self.xpath!r})"

    def select(self, node: Any) -> list[Any]:
        if not self.xpath:
            return [node]
        result = node.xpath(self.xpath)
        return list(result) if isinstance(result, list) else [result]

    def empty(self) -> Any:
        return [] if self.collection else None

    def default_value(self) -> Any:
        return self.empty()

    def extract(self, node: Any, model: type | None = None) -> Any:
        """Select and cast this field's value(s) from *node*.

        *model* is the record kind being parsed, reported in
        :class:`~biocyc.errors.ObjectInvalid`; defaults to the declaring class.
        """
        model = model or self.owner
        values = [self.cast(candidate, model) for candidate in self.select(node)]
        if not values:
            if not self.null:
                raise ObjectInvalid(f"{_model_name(model)}.{self.name} is required", model, self.name, node)
            return self.default_value()
        return values if self.collection else values[0]

    def cast(self, node: Any, model: type | None = None) -> Any:
        raise NotImplementedError

    def apply(self, instance: Record, node: Any) -> None:
        raise NotImplementedError


class Attr(Field):
    """A scalar or nested-record field.

    ``kind`` is a scalar type tag (see :mod:`biocyc.types`), a record class,
    or the registered name of a record kind (for forward references).
    ``transform`` is applied to the final value, defaults included.
    """

    def __init__(
        self,
        xpath: str | None = None,
        *,
        kind: str | type = "string",
        collection: bool = False,
        null: bool = True,
        default: Any = _MISSING,
        transform: Callable[[Any], Any] | None = None,
    ) -> None:
        super().__init__(xpath, collection=collection, null=null)
        self.kind = kind
        self.default = default
        self.transform = transform

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        # populated values live in the instance __dict__ and shadow this
        if instance is None:
            return self
        value = self.default_value()
        return self.transform(value) if self.transform is not None else value

    def default_value(self) -> Any:
        if self.default is _MISSING:
            return self.empty()
        return copy.copy(self.default)

    def cast(self, node: Any, model: type | None = None) -> Any:
        kind = self.kind
        if isinstance(kind, str):
            if kind in types.registry:
                return types.cast(kind, node)
            from biocyc.records import registry

            kind = registry.lookup(kind)
        if isinstance(kind, type) and hasattr(kind, "parse"):
            return kind.parse(node)
        raise ValueError(f"Unknown type {self.kind!r}")

    def apply(self, instance: Record, node: Any) -> None:
        value = self.extract(node, type(instance))
        if self.transform is not None:
            value = self.transform(value)
        instance.__dict__[self.name] = value


@dataclass(frozen=True)
class Unresolved:
    """Reference state holding identities only."""

    identities: Identity | list[Identity] | None


@dataclass(frozen=True)
class Resolved:
    """Reference state holding the materialized record(s)."""

    value: Any


class Reference(Field):
    """A relationship to other BioCyc records, resolved lazily.

    ``detail`` is the detail tag used when the reference is resolved.
    """

    def __init__(
        self,
        xpath: str | None = None,
        *,
        collection: bool = False,
        null: bool = True,
        detail: str | None = None,
    ) -> None:
        super().__init__(xpath, collection=collection, null=null)
        self.detail = detail
        self.id_name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        super().__set_name__(owner, name)
        self.id_name = f"{name}_ids" if self.collection else f"{name}_id"
        setattr(owner, self.id_name, IdentityView(self))

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        state = self.state(instance)
        if state is None:
            return self.empty()
        if isinstance(state, Resolved):
            return state.value
        value = self.resolve(state.identities)
        instance._references[self.name] = Resolved(value)
        return value

    def __set__(self, instance: Any, value: Any) -> None:
        instance._references[self.name] = Resolved(value)

    def state(self, instance: Any) -> Unresolved | Resolved | None:
        return instance._references.get(self.name)

    def identities(self, instance: Any) -> Identity | list[Identity] | None:
        """The raw view; never performs I/O."""
        state = self.state(instance)
        if state is None:
            return self.empty()
        if isinstance(state, Unresolved):
            return self.empty() if state.identities is None else state.identities
        if state.value is None:
            return self.empty()
        if self.collection:
            return [record.identity for record in state.value]
        return state.value.identity

    def resolve(self, identities: Identity | list[Identity] | None) -> Any:
        if identities is None:
            return self.empty()
        if self.collection:
            return [identity.resolve(self.detail) for identity in identities]
        return identities.resolve(self.detail)

    def cast(self, node: Any, model: type | None = None) -> Identity:
        if not isinstance(node, etree._Element):
            raise TypeError(f"Invalid node type {type(node).__name__} for reference {self.name!r}")
        orgid, frameid = node.get("orgid"), node.get("frameid")
        if not orgid or not frameid:
            model = model or self.owner
            raise ObjectInvalid(
                f"{_model_name(model)}.{self.name} references <{node.tag}> without orgid/frameid",
                model, self.name, node,
            )
        return Identity(orgid, frameid)

    def apply(self, instance: Record, node: Any) -> None:
        instance._references[self.name] = Unresolved(self.extract(node, type(instance)))


class IdentityView:
    """The ``<name>_id(s)`` accessor paired with a :class:`Reference`."""

    def __init__(self, reference: Reference) -> None:
        self.reference = reference

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return self.reference.identities(instance)

    def __set__(self, instance: Any, value: Any) -> None:
        instance._references[self.reference.name] = Unresolved(value)
