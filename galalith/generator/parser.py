"""Canonical type-name parser and registry loader using Lark."""

import os
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any

from lark import Lark
from lark.exceptions import LarkError
from lark.visitors import Transformer

from .errors import RegistryError
from .types import (
    ARRAY_HEAD,
    FieldRegistration,
    MessageDef,
    ProtocolRegistration,
    Registry,
    RegistryDef,
    TypeDescriptor,
    TypeName,
    TypeTag,
)

_g_parser: Lark | None = None

# Primitive and boxed primitive spellings accepted in registry files
CANONICAL_PRIMITIVES: dict[str, TypeTag] = {
    "boolean": TypeTag.BOOL,
    "Boolean": TypeTag.BOOL,
    "byte": TypeTag.BYTE,
    "Byte": TypeTag.BYTE,
    "short": TypeTag.SHORT,
    "Short": TypeTag.SHORT,
    "int": TypeTag.INT,
    "Integer": TypeTag.INT,
    "long": TypeTag.LONG,
    "Long": TypeTag.LONG,
    "float": TypeTag.FLOAT,
    "Float": TypeTag.FLOAT,
    "double": TypeTag.DOUBLE,
    "Double": TypeTag.DOUBLE,
    "char": TypeTag.CHAR,
    "Character": TypeTag.CHAR,
    "String": TypeTag.STRING,
}

# Generic heads and the number of type parameters they take
CONTAINER_HEADS: dict[str, tuple[TypeTag, int]] = {
    "List": (TypeTag.LIST, 1),
    "Set": (TypeTag.SET, 1),
    "Map": (TypeTag.MAP, 2),
}


class TypeNameTransformer(Transformer):
    """Transform parse tree into TypeName values."""

    def qualified(self, args: list[Any]) -> str:
        # Only the last segment survives: package prefixes are dropped here
        return str(args[-1])

    def simple(self, args: list[Any]) -> TypeName:
        return TypeName(head=args[0])

    def generic(self, args: list[Any]) -> TypeName:
        return TypeName(head=args[0], params=tuple(args[1:]))

    def array(self, args: list[Any]) -> TypeName:
        return TypeName(head=ARRAY_HEAD, params=(args[0],))


def _parser() -> Lark:
    global _g_parser

    if not _g_parser:
        with open(f"{os.path.dirname(__file__)}/typename.lark", encoding="utf-8") as f:
            grammar = f.read()
        _g_parser = Lark(grammar, parser="lalr")
    return _g_parser


@lru_cache(maxsize=1024)
def parse_type_name(text: str) -> TypeName:
    """Parse a canonical type name such as ``java.util.List<Integer>``."""
    try:
        tree = _parser().parse(text)
    except LarkError as e:
        raise RegistryError(f"Malformed type name '{text}'") from e
    return TypeNameTransformer().transform(tree)


def resolve_descriptor(type_name: TypeName, message_ids: Mapping[str, int]) -> TypeDescriptor:
    """Build the descriptor tree for a parsed type name."""
    if type_name.is_array:
        element = resolve_descriptor(type_name.params[0], message_ids)
        return TypeDescriptor(TypeTag.ARRAY, type_name, (element,))

    if type_name.params:
        if type_name.head not in CONTAINER_HEADS:
            raise RegistryError(f"Unsupported generic type {type_name}")
        tag, arity = CONTAINER_HEADS[type_name.head]
        if len(type_name.params) != arity:
            raise RegistryError(
                f"{type_name.head} takes {arity} type parameter(s), got {len(type_name.params)}"
            )
        params = tuple(resolve_descriptor(p, message_ids) for p in type_name.params)
        return TypeDescriptor(tag, type_name, params)

    if type_name.head in CANONICAL_PRIMITIVES:
        return TypeDescriptor(CANONICAL_PRIMITIVES[type_name.head], type_name)

    if type_name.head in message_ids:
        return TypeDescriptor(
            TypeTag.OBJECT, type_name, protocol_id=message_ids[type_name.head]
        )

    raise RegistryError(f"Unknown type {type_name}")


def _build_fields(
    message: MessageDef, message_ids: Mapping[str, int]
) -> tuple[FieldRegistration, ...]:
    fields: list[FieldRegistration] = []
    # Every field after the first compatible one belongs to the version tail
    compatible = False
    for field_def in message.fields:
        compatible = compatible or field_def.compatible
        try:
            descriptor = resolve_descriptor(parse_type_name(field_def.type), message_ids)
        except RegistryError as e:
            raise RegistryError(f"{message.name}.{field_def.name}: {e}") from e
        fields.append(
            FieldRegistration(
                name=field_def.name,
                descriptor=descriptor,
                compatible=compatible,
                comment=field_def.comment,
            )
        )
    return tuple(fields)


def build_registry(definition: RegistryDef) -> Registry:
    """Resolve a registry definition into protocol registrations."""
    message_ids: dict[str, int] = {}
    for message in definition.messages:
        if message.name in message_ids:
            raise RegistryError(f"Duplicate message name {message.name}")
        message_ids[message.name] = message.id

    return Registry(
        ProtocolRegistration(
            protocol_id=message.id,
            name=message.name,
            fields=_build_fields(message, message_ids),
            module=message.module,
            comment=message.comment,
        )
        for message in definition.messages
    )


def load_registry(text: str) -> Registry:
    """Parse a JSON registry definition."""
    return build_registry(RegistryDef.from_json(text))


def load_registry_file(path: str | Path) -> Registry:
    """Read and parse a JSON registry file."""
    with open(path, encoding="utf-8") as f:
        return load_registry(f.read())
