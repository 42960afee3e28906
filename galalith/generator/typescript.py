"""TypeScript code generator for galalith protocols."""

from collections.abc import Mapping

from .emitter import FieldParts, Generator, MessageParts, Target
from .naming import TypeNameDialect
from .paths import capitalized_path, join_path, relative_path
from .strategies import CodeWriter, SerializerStrategy
from .templates import TemplateContract
from .types import FieldRegistration, ProtocolRegistration, TypeDescriptor, TypeTag

PRIMITIVE_TYPE_MAP = {
    "boolean": "boolean",
    "Boolean": "boolean",
    "byte": "number",
    "Byte": "number",
    "short": "number",
    "Short": "number",
    "int": "number",
    "Integer": "number",
    "long": "number",
    "Long": "number",
    "float": "number",
    "Float": "number",
    "double": "number",
    "Double": "number",
    "char": "string",
    "Character": "string",
    "String": "string",
}

CONTAINER_TYPE_MAP = {
    "List": "Array",
    "Set": "Set",
    "Map": "Map",
}

DIALECT = TypeNameDialect(PRIMITIVE_TYPE_MAP, CONTAINER_TYPE_MAP, "Array<{}>")

# Map primitive tags to ByteBuffer method suffixes
BUFFER_SUFFIX_MAP = {
    TypeTag.BOOL: "Boolean",
    TypeTag.BYTE: "Byte",
    TypeTag.SHORT: "Short",
    TypeTag.INT: "Int",
    TypeTag.LONG: "Long",
    TypeTag.FLOAT: "Float",
    TypeTag.DOUBLE: "Double",
    TypeTag.CHAR: "Char",
    TypeTag.STRING: "String",
}

DEFAULT_VALUES = {
    TypeTag.BOOL: "false",
    TypeTag.BYTE: "0",
    TypeTag.SHORT: "0",
    TypeTag.INT: "0",
    TypeTag.LONG: "0",
    TypeTag.FLOAT: "0",
    TypeTag.DOUBLE: "0",
    TypeTag.CHAR: "''",
    TypeTag.STRING: "''",
    TypeTag.ARRAY: "[]",
    TypeTag.LIST: "[]",
    TypeTag.SET: "new Set()",
    TypeTag.MAP: "new Map()",
    TypeTag.OBJECT: "null",
}


class TsPrimitiveSerializer(SerializerStrategy):
    def __init__(self, suffix: str):
        self.suffix = suffix

    def write(self, writer: CodeWriter, expr: str, depth: int, descriptor: TypeDescriptor) -> None:
        writer.line(depth, f"buffer.write{self.suffix}({expr});")

    def read(self, writer: CodeWriter, depth: int, descriptor: TypeDescriptor) -> str:
        result = f"result{writer.next_index()}"
        writer.line(depth, f"const {result} = buffer.read{self.suffix}();")
        return result


class TsSequenceSerializer(SerializerStrategy):
    """Array and Set: int32 size followed by the elements."""

    def __init__(self, size: str, insert: str):
        self.size = size
        self.insert = insert

    def write(self, writer: CodeWriter, expr: str, depth: int, descriptor: TypeDescriptor) -> None:
        element = f"element{writer.next_index()}"
        writer.line(depth, f"buffer.writeInt({expr}.{self.size});")
        writer.line(depth, f"for (const {element} of {expr}) {{")
        writer.write(element, depth + 1, descriptor.element)
        writer.line(depth, "}")

    def read(self, writer: CodeWriter, depth: int, descriptor: TypeDescriptor) -> str:
        i = writer.next_index()
        writer.line(depth, f"const result{i} = new {writer.type_name(descriptor)}();")
        writer.line(depth, f"const size{i} = buffer.readInt();")
        writer.line(depth, f"for (let index{i} = 0; index{i} < size{i}; index{i}++) {{")
        element = writer.read(depth + 1, descriptor.element)
        writer.line(depth + 1, f"result{i}.{self.insert}({element});")
        writer.line(depth, "}")
        return f"result{i}"


class TsMapSerializer(SerializerStrategy):
    def write(self, writer: CodeWriter, expr: str, depth: int, descriptor: TypeDescriptor) -> None:
        i = writer.next_index()
        writer.line(depth, f"buffer.writeInt({expr}.size);")
        writer.line(depth, f"for (const [key{i}, value{i}] of {expr}) {{")
        writer.write(f"key{i}", depth + 1, descriptor.key)
        writer.write(f"value{i}", depth + 1, descriptor.value)
        writer.line(depth, "}")

    def read(self, writer: CodeWriter, depth: int, descriptor: TypeDescriptor) -> str:
        i = writer.next_index()
        writer.line(depth, f"const result{i} = new {writer.type_name(descriptor)}();")
        writer.line(depth, f"const size{i} = buffer.readInt();")
        writer.line(depth, f"for (let index{i} = 0; index{i} < size{i}; index{i}++) {{")
        key = writer.read(depth + 1, descriptor.key)
        value = writer.read(depth + 1, descriptor.value)
        writer.line(depth + 1, f"result{i}.set({key}, {value});")
        writer.line(depth, "}")
        return f"result{i}"


class TsObjectSerializer(SerializerStrategy):
    def field(self, writer: CodeWriter, field: FieldRegistration) -> tuple[str, str]:
        return f"{writer.type_name(field.descriptor)} | null", field.name

    def write(self, writer: CodeWriter, expr: str, depth: int, descriptor: TypeDescriptor) -> None:
        writer.line(depth, f"buffer.writePacket({expr}, {descriptor.protocol_id});")

    def read(self, writer: CodeWriter, depth: int, descriptor: TypeDescriptor) -> str:
        result = f"result{writer.next_index()}"
        writer.line(depth, f"const {result} = buffer.readPacket({descriptor.protocol_id});")
        return result


class TypeScriptTarget(Target):
    name = "typescript"
    extension = "ts"
    root_dir = "tsProtocol"
    dialect = DIALECT
    message_template = TemplateContract(
        "typescript.ts.j2",
        ("imports", "doc", "name", "fields", "protocol_id", "write_body", "read_body"),
    )
    manager_template = TemplateContract("typescript-manager.ts.j2", ("imports", "registrations"))
    runtime_assets = ("buffer/ByteBuffer.ts",)

    doc_depth = 0
    field_depth = 1
    body_depth = 2
    manager_depth = 0

    def strategies(self) -> Mapping[TypeTag, SerializerStrategy]:
        strategies: dict[TypeTag, SerializerStrategy] = {
            tag: TsPrimitiveSerializer(suffix) for tag, suffix in BUFFER_SUFFIX_MAP.items()
        }
        strategies[TypeTag.ARRAY] = TsSequenceSerializer("length", "push")
        strategies[TypeTag.LIST] = TsSequenceSerializer("length", "push")
        strategies[TypeTag.SET] = TsSequenceSerializer("size", "add")
        strategies[TypeTag.MAP] = TsMapSerializer()
        strategies[TypeTag.OBJECT] = TsObjectSerializer()
        return strategies

    def dependency_line(
        self, registration: ProtocolRegistration, dependency: ProtocolRegistration
    ) -> str:
        path = relative_path(capitalized_path(registration), capitalized_path(dependency))
        return f"import {dependency.name} from '{join_path(path, dependency.name)}';"

    def declaration(self, parts: FieldParts) -> str:
        default = DEFAULT_VALUES[parts.field.tag]
        return f"{parts.identifier}: {parts.type_name} = {default};"

    def write_expression(self, field: FieldRegistration) -> str:
        return f"packet.{field.name}"

    def guard(self, writer: CodeWriter, depth: int) -> None:
        writer.line(depth, "if (!buffer.isReadable()) {")
        writer.line(depth + 1, "return packet;")
        writer.line(depth, "}")

    def read_assignment(self, field: FieldRegistration, result: str) -> str:
        return f"packet.{field.name} = {result};"

    def message_values(self, parts: MessageParts) -> tuple[str, ...]:
        registration = parts.registration
        return (
            parts.dependencies,
            parts.doc,
            registration.name,
            parts.declarations,
            str(registration.protocol_id),
            parts.write_body,
            parts.read_body,
        )

    def manager_import(self, registration: ProtocolRegistration) -> str:
        path = join_path(".", capitalized_path(registration), registration.name)
        return f"import {registration.name} from '{path}';"

    def manager_registration(self, registration: ProtocolRegistration) -> str:
        return f"protocols.set({registration.protocol_id}, {registration.name});"

    def manager_values(self, imports: str, registrations: str) -> tuple[str, ...]:
        return (imports, registrations)


class TypeScriptGenerator(Generator):
    """Generates one TypeScript module per message under ``tsProtocol/``."""

    target = TypeScriptTarget()
