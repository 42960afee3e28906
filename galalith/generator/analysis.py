"""Nested message dependency analysis."""

from .errors import DependencyCycleError
from .types import ProtocolRegistration, Registry, TypeTag


def direct_sub_protocol_ids(registration: ProtocolRegistration) -> list[int]:
    """Return the nested message ids referenced by one message's fields.

    Containers are searched element-wise. The message's own id is excluded
    and every id appears once, in field order. A field holding the message's
    own type outside a container raises DependencyCycleError.
    """
    found: list[int] = []
    for field in registration.fields:
        if field.descriptor.protocol_id == registration.protocol_id:
            raise DependencyCycleError(
                f"{registration.name}.{field.name} holds its own message type: "
                f"{registration.protocol_id} -> {registration.protocol_id}"
            )
        for descriptor in field.descriptor.walk():
            if descriptor.tag != TypeTag.OBJECT:
                continue
            sub_id = descriptor.protocol_id
            if sub_id is None or sub_id == registration.protocol_id or sub_id in found:
                continue
            found.append(sub_id)
    return found


def sub_protocol_ids(registry: Registry, protocol_id: int) -> list[int]:
    """Return every message id a message depends on, transitively.

    Ids come in depth-first discovery order without duplicates, and the
    requested id itself is never part of the result. Raises
    DependencyCycleError when two or more messages reference each other.
    """
    found: list[int] = []

    def visit(current: int, path: list[int]) -> None:
        for sub_id in direct_sub_protocol_ids(registry.get(current)):
            if sub_id in path:
                cycle = " -> ".join(str(i) for i in [*path[path.index(sub_id) :], sub_id])
                raise DependencyCycleError(f"Nested messages form a cycle: {cycle}")
            if sub_id in found:
                continue
            found.append(sub_id)
            visit(sub_id, [*path, sub_id])

    visit(protocol_id, [protocol_id])
    return found
