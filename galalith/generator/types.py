"""Type definitions for protocol registries and code generation."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import StrEnum, auto

from dataclasses_json import DataClassJsonMixin

from .errors import RegistryError


class TypeTag(StrEnum):
    """Canonical field type tags. Every target maps each tag to a serializer."""

    BOOL = auto()
    BYTE = auto()
    SHORT = auto()
    INT = auto()
    LONG = auto()
    FLOAT = auto()
    DOUBLE = auto()
    CHAR = auto()
    STRING = auto()
    ARRAY = auto()
    LIST = auto()
    SET = auto()
    MAP = auto()
    OBJECT = auto()


ARRAY_HEAD = "[]"


@dataclass(frozen=True)
class TypeName:
    """A parsed canonical type name.

    ``head`` has its package prefix stripped already. Arrays use ``ARRAY_HEAD``
    as head and carry the element type as their only parameter.
    """

    head: str
    params: tuple["TypeName", ...] = ()

    @property
    def is_array(self) -> bool:
        return self.head == ARRAY_HEAD

    def __str__(self) -> str:
        if self.is_array:
            return f"{self.params[0]}[]"
        if self.params:
            return f"{self.head}<{', '.join(str(p) for p in self.params)}>"
        return self.head


@dataclass(frozen=True)
class TypeDescriptor:
    """Canonical description of a field type.

    ``params`` holds the element type of arrays, lists and sets, and the key
    followed by the value type of maps. ``protocol_id`` is only set for
    nested messages.
    """

    tag: TypeTag
    type_name: TypeName
    params: tuple["TypeDescriptor", ...] = ()
    protocol_id: int | None = None

    @property
    def canonical(self) -> str:
        return str(self.type_name)

    @property
    def element(self) -> "TypeDescriptor":
        return self.params[0]

    @property
    def key(self) -> "TypeDescriptor":
        return self.params[0]

    @property
    def value(self) -> "TypeDescriptor":
        return self.params[1]

    def walk(self) -> Iterator["TypeDescriptor"]:
        """Yield this descriptor and all nested ones, depth first."""
        yield self
        for param in self.params:
            yield from param.walk()


@dataclass(frozen=True)
class FieldRegistration:
    """A single message field, in wire order."""

    name: str
    descriptor: TypeDescriptor
    compatible: bool = False
    comment: str | None = None

    @property
    def tag(self) -> TypeTag:
        return self.descriptor.tag


@dataclass(frozen=True)
class ProtocolRegistration:
    """A message type with its unique protocol id and ordered fields."""

    protocol_id: int
    name: str
    fields: tuple[FieldRegistration, ...] = ()
    module: str = ""
    comment: str | None = None


class Registry:
    """Ordered, read-only collection of protocol registrations."""

    def __init__(self, protocols: Iterable[ProtocolRegistration]):
        self._protocols = tuple(protocols)
        self._by_id: dict[int, ProtocolRegistration] = {}
        for protocol in self._protocols:
            if protocol.protocol_id in self._by_id:
                raise RegistryError(f"Duplicate protocol id {protocol.protocol_id}")
            self._by_id[protocol.protocol_id] = protocol

    def __iter__(self) -> Iterator[ProtocolRegistration]:
        return iter(self._protocols)

    def __len__(self) -> int:
        return len(self._protocols)

    def get(self, protocol_id: int) -> ProtocolRegistration:
        try:
            return self._by_id[protocol_id]
        except KeyError:
            raise RegistryError(f"Unknown protocol id {protocol_id}") from None


@dataclass
class FieldDef(DataClassJsonMixin):
    """A field as it appears in a registry file."""

    name: str
    type: str
    compatible: bool = False
    comment: str | None = None


@dataclass
class MessageDef(DataClassJsonMixin):
    """A message as it appears in a registry file."""

    id: int
    name: str
    fields: list[FieldDef] = field(default_factory=list)
    module: str = ""
    comment: str | None = None


@dataclass
class RegistryDef(DataClassJsonMixin):
    """Top level of a registry file."""

    messages: list[MessageDef] = field(default_factory=list)
