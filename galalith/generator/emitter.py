"""Per-message and manager emitters shared by every target language."""

import logging
import shutil
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import ClassVar

from .analysis import sub_protocol_ids
from .errors import GeneratorError
from .naming import TypeNameDialect
from .paths import capitalized_path
from .strategies import INDENT, CodeWriter, SerializerStrategy, StrategyTable, new_writer
from .templates import TemplateContract
from .types import FieldRegistration, ProtocolRegistration, Registry, TypeTag

logger = logging.getLogger(__name__)

MANAGER_NAME = "ProtocolManager"


@dataclass(frozen=True)
class GeneratedFile:
    """A rendered file waiting to be written."""

    path: Path
    content: str


@dataclass(frozen=True)
class FieldParts:
    """Declared type and identifier of one field."""

    field: FieldRegistration
    type_name: str
    identifier: str


@dataclass(frozen=True)
class MessageParts:
    """Rendered fragments of one message, before template substitution."""

    registration: ProtocolRegistration
    dependencies: str
    doc: str
    fields: tuple[FieldParts, ...]
    declarations: str
    write_body: str
    read_body: str


class Target(ABC):
    """Language specific pieces of code generation."""

    name: ClassVar[str]
    extension: ClassVar[str]
    root_dir: ClassVar[str]
    dialect: ClassVar[TypeNameDialect]
    message_template: ClassVar[TemplateContract]
    manager_template: ClassVar[TemplateContract]
    runtime_assets: ClassVar[tuple[str, ...]] = ()

    comment_prefix: ClassVar[str] = "// "
    doc_depth: ClassVar[int] = 0
    field_depth: ClassVar[int] = 1
    body_depth: ClassVar[int] = 2
    manager_depth: ClassVar[int] = 0

    @abstractmethod
    def strategies(self) -> Mapping[TypeTag, SerializerStrategy]:
        """Return one serializer strategy per type tag."""

    @abstractmethod
    def dependency_line(
        self, registration: ProtocolRegistration, dependency: ProtocolRegistration
    ) -> str:
        """Import or include statement for a nested message."""

    @abstractmethod
    def declaration(self, parts: FieldParts) -> str:
        """Member declaration of one field."""

    @abstractmethod
    def write_expression(self, field: FieldRegistration) -> str:
        """Expression that reads a field from the message being encoded."""

    @abstractmethod
    def guard(self, writer: CodeWriter, depth: int) -> None:
        """Emit the end-of-input check placed before compatible fields."""

    @abstractmethod
    def read_assignment(self, field: FieldRegistration, result: str) -> str:
        """Statement storing a decoded value into the new message."""

    @abstractmethod
    def message_values(self, parts: MessageParts) -> tuple[str, ...]:
        """Values for the message template, in slot order."""

    @abstractmethod
    def manager_import(self, registration: ProtocolRegistration) -> str:
        """Import or include statement for a message in the manager file."""

    @abstractmethod
    def manager_registration(self, registration: ProtocolRegistration) -> str:
        """Statement mapping a protocol id to its constructor."""

    @abstractmethod
    def manager_values(self, imports: str, registrations: str) -> tuple[str, ...]:
        """Values for the manager template, in slot order."""

    def message_path(self, root: Path, registration: ProtocolRegistration) -> Path:
        return root / capitalized_path(registration) / f"{registration.name}.{self.extension}"


@dataclass(frozen=True)
class GenerationContext:
    """Everything one generation run needs. Created by Generator.init()."""

    output_root: Path
    strategies: StrategyTable
    target: Target


def render_doc(text: str | None, depth: int, prefix: str) -> list[str]:
    """Split documentation into comment lines at the given depth."""
    if not text or not text.strip():
        return []
    return [f"{INDENT * depth}{prefix}{line}".rstrip() for line in text.strip().splitlines()]


def _unique(lines: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(lines))


def emit_message(
    context: GenerationContext, registry: Registry, registration: ProtocolRegistration
) -> GeneratedFile:
    """Render the source file of one message.

    Raises ConfigurationError when a field type has no serializer.
    """
    target = context.target
    writer = new_writer(context.strategies, target.dialect)

    dependencies = _unique(
        target.dependency_line(registration, registry.get(sub_id))
        for sub_id in sub_protocol_ids(registry, registration.protocol_id)
    )
    doc = "\n".join(render_doc(registration.comment, target.doc_depth, target.comment_prefix))

    fields: list[FieldParts] = []
    declarations = writer.fork()
    for field in registration.fields:
        type_name, identifier = writer.strategy(field.descriptor).field(writer, field)
        parts = FieldParts(field, type_name, identifier)
        fields.append(parts)
        declarations.lines.extend(
            render_doc(field.comment, target.field_depth, target.comment_prefix)
        )
        declarations.line(target.field_depth, target.declaration(parts))

    write_body = writer.fork()
    for field in registration.fields:
        write_body.write(target.write_expression(field), target.body_depth, field.descriptor)

    read_body = writer.fork()
    # A compatible field puts every later field in the version tail too
    compatible = False
    for field in registration.fields:
        compatible = compatible or field.compatible
        if compatible:
            target.guard(read_body, target.body_depth)
        result = read_body.read(target.body_depth, field.descriptor)
        read_body.line(target.body_depth, target.read_assignment(field, result))

    parts = MessageParts(
        registration=registration,
        dependencies="\n".join(dependencies),
        doc=doc.strip(),
        fields=tuple(fields),
        declarations=declarations.text(),
        write_body=write_body.text(),
        read_body=read_body.text(),
    )
    content = target.message_template.render(target.message_values(parts))
    logger.debug(
        "Rendered %s message %s (%d)", target.name, registration.name, registration.protocol_id
    )
    return GeneratedFile(target.message_path(context.output_root, registration), content)


def emit_manager(context: GenerationContext, registry: Registry) -> GeneratedFile:
    """Render the file mapping every protocol id to its message."""
    target = context.target
    imports = "\n".join(_unique(target.manager_import(r) for r in registry))
    registrations = "\n".join(
        f"{INDENT * target.manager_depth}{target.manager_registration(r)}" for r in registry
    ).strip()
    content = target.manager_template.render(target.manager_values(imports, registrations))
    return GeneratedFile(context.output_root / f"{MANAGER_NAME}.{target.extension}", content)


def runtime_files(context: GenerationContext) -> list[GeneratedFile]:
    """Runtime support files copied verbatim into the output tree."""
    runtime_dir = resources.files("galalith.generator").joinpath("runtimes", context.target.name)
    return [
        GeneratedFile(
            context.output_root / asset,
            runtime_dir.joinpath(*asset.split("/")).read_text(encoding="utf-8"),
        )
        for asset in context.target.runtime_assets
    ]


def write_files(files: Iterable[GeneratedFile]) -> list[Path]:
    """Write rendered files, creating directories as needed."""
    written: list[Path] = []
    for generated in files:
        generated.path.parent.mkdir(parents=True, exist_ok=True)
        generated.path.write_text(generated.content, encoding="utf-8")
        logger.info("Wrote %s", generated.path)
        written.append(generated.path)
    return written


class Generator:
    """Drives one target language over a whole registry.

    Call init() before generating and clear() afterwards. Every message is
    rendered before anything is written, so a ConfigurationError in one
    message aborts the run without partial output.
    """

    target: ClassVar[Target]

    def __init__(self) -> None:
        self._context: GenerationContext | None = None

    @property
    def context(self) -> GenerationContext:
        if self._context is None:
            raise GeneratorError(f"{self.target.name} generator is not initialized")
        return self._context

    def init(self, output_path: str | Path, *, clean: bool = True) -> GenerationContext:
        """Build the strategy table and prepare the output directory."""
        target = self.target
        strategies = StrategyTable.complete(target.name, target.strategies())
        target.message_template.verify()
        target.manager_template.verify()

        output_root = Path(output_path) / target.root_dir
        if clean and output_root.exists():
            logger.debug("Removing previous output %s", output_root)
            shutil.rmtree(output_root)
        output_root.mkdir(parents=True, exist_ok=True)

        self._context = GenerationContext(output_root, strategies, target)
        return self._context

    def clear(self) -> None:
        self._context = None

    def render(self, registry: Registry) -> list[GeneratedFile]:
        context = self.context
        logger.debug("Rendering %d %s messages", len(registry), self.target.name)
        files = [emit_message(context, registry, r) for r in registry]
        files.append(emit_manager(context, registry))
        files.extend(runtime_files(context))
        return files

    def generate(self, registry: Registry) -> list[Path]:
        """Render and write every message, the manager and the runtime."""
        return write_files(self.render(registry))
