"""C++ code generator for galalith protocols."""

from collections.abc import Mapping

from .emitter import FieldParts, Generator, MessageParts, Target
from .naming import TypeNameDialect
from .paths import capitalized_path, join_path
from .strategies import INDENT, CodeWriter, SerializerStrategy
from .templates import TemplateContract
from .types import FieldRegistration, ProtocolRegistration, TypeDescriptor, TypeTag

PRIMITIVE_TYPE_MAP = {
    "boolean": "bool",
    "Boolean": "bool",
    "byte": "int8_t",
    "Byte": "int8_t",
    "short": "int16_t",
    "Short": "int16_t",
    "int": "int32_t",
    "Integer": "int32_t",
    "long": "int64_t",
    "Long": "int64_t",
    "float": "float",
    "Float": "float",
    "double": "double",
    "Double": "double",
    "char": "char",
    "Character": "char",
    "String": "string",
}

CONTAINER_TYPE_MAP = {
    "List": "list",
    "Set": "set",
    "Map": "map",
}

DIALECT = TypeNameDialect(PRIMITIVE_TYPE_MAP, CONTAINER_TYPE_MAP, "vector<{}>")

# Map primitive tags to ByteBuffer method suffixes
BUFFER_SUFFIX_MAP = {
    TypeTag.BOOL: "Bool",
    TypeTag.BYTE: "Byte",
    TypeTag.SHORT: "Short",
    TypeTag.INT: "Int",
    TypeTag.LONG: "Long",
    TypeTag.FLOAT: "Float",
    TypeTag.DOUBLE: "Double",
    TypeTag.CHAR: "Char",
    TypeTag.STRING: "String",
}


class CppPrimitiveSerializer(SerializerStrategy):
    def __init__(self, suffix: str):
        self.suffix = suffix

    def write(self, writer: CodeWriter, expr: str, depth: int, descriptor: TypeDescriptor) -> None:
        writer.line(depth, f"buffer.write{self.suffix}({expr});")

    def read(self, writer: CodeWriter, depth: int, descriptor: TypeDescriptor) -> str:
        result = f"result{writer.next_index()}"
        writer.line(depth, f"{writer.type_name(descriptor)} {result} = buffer.read{self.suffix}();")
        return result


class CppSequenceSerializer(SerializerStrategy):
    """vector, list and set: int32 size followed by the elements."""

    def __init__(self, insert: str):
        self.insert = insert

    def write(self, writer: CodeWriter, expr: str, depth: int, descriptor: TypeDescriptor) -> None:
        element = f"element{writer.next_index()}"
        writer.line(depth, f"buffer.writeInt({expr}.size());")
        writer.line(depth, f"for (const auto &{element} : {expr}) {{")
        writer.write(element, depth + 1, descriptor.element)
        writer.line(depth, "}")

    def read(self, writer: CodeWriter, depth: int, descriptor: TypeDescriptor) -> str:
        i = writer.next_index()
        writer.line(depth, f"{writer.type_name(descriptor)} result{i};")
        writer.line(depth, f"auto size{i} = buffer.readInt();")
        writer.line(depth, f"for (int index{i} = 0; index{i} < size{i}; index{i}++) {{")
        element = writer.read(depth + 1, descriptor.element)
        writer.line(depth + 1, f"result{i}.{self.insert}({element});")
        writer.line(depth, "}")
        return f"result{i}"


class CppMapSerializer(SerializerStrategy):
    def write(self, writer: CodeWriter, expr: str, depth: int, descriptor: TypeDescriptor) -> None:
        i = writer.next_index()
        writer.line(depth, f"buffer.writeInt({expr}.size());")
        writer.line(depth, f"for (const auto &[key{i}, value{i}] : {expr}) {{")
        writer.write(f"key{i}", depth + 1, descriptor.key)
        writer.write(f"value{i}", depth + 1, descriptor.value)
        writer.line(depth, "}")

    def read(self, writer: CodeWriter, depth: int, descriptor: TypeDescriptor) -> str:
        i = writer.next_index()
        writer.line(depth, f"{writer.type_name(descriptor)} result{i};")
        writer.line(depth, f"auto size{i} = buffer.readInt();")
        writer.line(depth, f"for (int index{i} = 0; index{i} < size{i}; index{i}++) {{")
        key = writer.read(depth + 1, descriptor.key)
        value = writer.read(depth + 1, descriptor.value)
        writer.line(depth + 1, f"result{i}.emplace({key}, {value});")
        writer.line(depth, "}")
        return f"result{i}"


class CppObjectSerializer(SerializerStrategy):
    """Nested messages are written by pointer and read back as owned values."""

    def write(self, writer: CodeWriter, expr: str, depth: int, descriptor: TypeDescriptor) -> None:
        writer.line(depth, f"buffer.writePacket(&{expr}, {descriptor.protocol_id});")

    def read(self, writer: CodeWriter, depth: int, descriptor: TypeDescriptor) -> str:
        result = f"result{writer.next_index()}"
        type_name = writer.type_name(descriptor)
        writer.line(
            depth,
            f"auto {result} = *(({type_name} *) "
            f"buffer.readPacket({descriptor.protocol_id}).get());",
        )
        return result


class CppTarget(Target):
    name = "cpp"
    extension = "h"
    root_dir = "cppProtocol"
    dialect = DIALECT
    message_template = TemplateContract(
        "cpp.h.j2",
        (
            "guard",
            "root",
            "includes",
            "doc",
            "name",
            "fields",
            "value_of_params",
            "value_of_body",
            "protocol_id",
            "operator_body",
            "write_body",
            "read_body",
        ),
    )
    manager_template = TemplateContract("cpp-manager.h.j2", ("root", "includes", "registrations"))
    runtime_assets = ("ByteBuffer.h",)

    doc_depth = 1
    field_depth = 2
    body_depth = 3
    manager_depth = 2

    def strategies(self) -> Mapping[TypeTag, SerializerStrategy]:
        strategies: dict[TypeTag, SerializerStrategy] = {
            tag: CppPrimitiveSerializer(suffix) for tag, suffix in BUFFER_SUFFIX_MAP.items()
        }
        strategies[TypeTag.ARRAY] = CppSequenceSerializer("emplace_back")
        strategies[TypeTag.LIST] = CppSequenceSerializer("emplace_back")
        strategies[TypeTag.SET] = CppSequenceSerializer("emplace")
        strategies[TypeTag.MAP] = CppMapSerializer()
        strategies[TypeTag.OBJECT] = CppObjectSerializer()
        return strategies

    def _include(self, registration: ProtocolRegistration) -> str:
        path = join_path(self.root_dir, capitalized_path(registration), registration.name)
        return f'#include "{path}.h"'

    def dependency_line(
        self, registration: ProtocolRegistration, dependency: ProtocolRegistration
    ) -> str:
        return self._include(dependency)

    def declaration(self, parts: FieldParts) -> str:
        return f"{parts.type_name} {parts.identifier};"

    def write_expression(self, field: FieldRegistration) -> str:
        return f"message->{field.name}"

    def guard(self, writer: CodeWriter, depth: int) -> None:
        writer.line(depth, "if (!buffer.isReadable()) { return packet; }")

    def read_assignment(self, field: FieldRegistration, result: str) -> str:
        return f"packet->{field.name} = {result};"

    def message_values(self, parts: MessageParts) -> tuple[str, ...]:
        registration = parts.registration
        body_indent = INDENT * self.body_depth

        value_of_params = ", ".join(f"{f.type_name} {f.identifier}" for f in parts.fields)
        value_of_body = "\n".join(
            f"{body_indent}packet.{f.identifier} = {f.identifier};" for f in parts.fields
        )
        # Field-wise ordering so messages can be set elements and map keys
        operator_body = "\n".join(
            f"{body_indent}if ({f.identifier} < _.{f.identifier}) {{ return true; }}\n"
            f"{body_indent}if (_.{f.identifier} < {f.identifier}) {{ return false; }}"
            for f in parts.fields
        )

        return (
            registration.name.upper(),
            self.root_dir,
            parts.dependencies,
            parts.doc,
            registration.name,
            parts.declarations,
            value_of_params,
            value_of_body.strip(),
            str(registration.protocol_id),
            operator_body.strip(),
            parts.write_body,
            parts.read_body,
        )

    def manager_import(self, registration: ProtocolRegistration) -> str:
        return self._include(registration)

    def manager_registration(self, registration: ProtocolRegistration) -> str:
        return f"protocols[{registration.protocol_id}] = new {registration.name}Registration();"

    def manager_values(self, imports: str, registrations: str) -> tuple[str, ...]:
        return (self.root_dir, imports, registrations)


class CppGenerator(Generator):
    """Generates one C++ header per message under ``cppProtocol/``."""

    target = CppTarget()
