"""Serializer strategies and the per-target strategy table."""

import itertools
from collections.abc import Iterator, Mapping
from typing import Self

from .errors import ConfigurationError
from .naming import TypeNameDialect
from .types import FieldRegistration, TypeDescriptor, TypeTag

INDENT = "    "


class SerializerStrategy:
    """Emits declaration, encode and decode code for one type tag.

    Strategies hold no per-run state: everything that changes while a message
    is emitted lives in the CodeWriter passed to each call.
    """

    def field(self, writer: "CodeWriter", field: FieldRegistration) -> tuple[str, str]:
        """Return the declared type and identifier of a field."""
        return writer.type_name(field.descriptor), field.name

    def write(
        self, writer: "CodeWriter", expr: str, depth: int, descriptor: TypeDescriptor
    ) -> None:
        """Emit code that encodes the value of ``expr``."""
        raise NotImplementedError

    def read(self, writer: "CodeWriter", depth: int, descriptor: TypeDescriptor) -> str:
        """Emit code that decodes a value and return the expression holding it."""
        raise NotImplementedError


class StrategyTable:
    """Maps type tags to the serializer strategies of one target language."""

    def __init__(self, language: str):
        self.language = language
        self._strategies: dict[TypeTag, SerializerStrategy] = {}
        self._sealed = False

    @classmethod
    def complete(cls, language: str, strategies: Mapping[TypeTag, SerializerStrategy]) -> Self:
        """Build a sealed table that must cover every type tag."""
        missing = [tag.value for tag in TypeTag if tag not in strategies]
        if missing:
            raise ConfigurationError(
                f"{language} has no serializer for type(s): {', '.join(missing)}"
            )
        table = cls(language)
        for tag, strategy in strategies.items():
            table.register(tag, strategy)
        table.seal()
        return table

    def register(self, tag: TypeTag, strategy: SerializerStrategy) -> None:
        if self._sealed:
            raise ConfigurationError(f"{self.language} strategy table is read-only")
        self._strategies[tag] = strategy

    def seal(self) -> None:
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def lookup(self, tag: TypeTag) -> SerializerStrategy:
        try:
            return self._strategies[tag]
        except KeyError:
            raise ConfigurationError(
                f"{self.language} has no serializer for type '{tag}'"
            ) from None

    def __contains__(self, tag: object) -> bool:
        return tag in self._strategies


class CodeWriter:
    """Collects the lines of one generated code fragment.

    The temp counter is shared by every fragment of a message so that loop
    and result variables never collide inside one generated file.
    """

    def __init__(self, table: StrategyTable, dialect: TypeNameDialect, counter: Iterator[int]):
        self.table = table
        self.dialect = dialect
        self._counter = counter
        self.lines: list[str] = []

    def fork(self) -> "CodeWriter":
        """Return an empty writer sharing this writer's table and counter."""
        return CodeWriter(self.table, self.dialect, self._counter)

    def next_index(self) -> int:
        return next(self._counter)

    def line(self, depth: int, text: str) -> None:
        self.lines.append(INDENT * depth + text)

    def strategy(self, descriptor: TypeDescriptor) -> SerializerStrategy:
        try:
            return self.table.lookup(descriptor.tag)
        except ConfigurationError as e:
            raise ConfigurationError(f"{e} (unmapped type {descriptor.canonical})") from e

    def type_name(self, descriptor: TypeDescriptor) -> str:
        return self.dialect.spell(descriptor.type_name)

    def write(self, expr: str, depth: int, descriptor: TypeDescriptor) -> None:
        self.strategy(descriptor).write(self, expr, depth, descriptor)

    def read(self, depth: int, descriptor: TypeDescriptor) -> str:
        return self.strategy(descriptor).read(self, depth, descriptor)

    def text(self) -> str:
        # First line indentation comes from the template
        return "\n".join(self.lines).strip()


def new_writer(table: StrategyTable, dialect: TypeNameDialect) -> CodeWriter:
    """Start a writer with the temp counter reset to zero."""
    return CodeWriter(table, dialect, itertools.count())
