"""Translation of canonical type names into target language spellings."""

from collections.abc import Mapping
from dataclasses import dataclass, field

from .parser import parse_type_name
from .types import TypeName


@dataclass(frozen=True)
class TypeNameDialect:
    """How one target language spells canonical types.

    Args:
        primitives: exact-match aliases for primitive and boxed names
        containers: replacements for generic heads (List, Set, Map)
        array_format: format string applied to the translated element of T[]
    """

    primitives: Mapping[str, str]
    containers: Mapping[str, str] = field(default_factory=dict)
    array_format: str = "{}[]"

    def spell(self, type_name: TypeName) -> str:
        """Render a parsed type name, recursing into type parameters."""
        if type_name.is_array:
            return self.array_format.format(self.spell(type_name.params[0]))

        if type_name.params:
            head = self.containers.get(type_name.head, type_name.head)
            params = ", ".join(self.spell(p) for p in type_name.params)
            return f"{head}<{params}>"

        # Unknown names are message types and keep their spelling
        return self.primitives.get(type_name.head, type_name.head)


def translate(canonical: str, dialect: TypeNameDialect) -> str:
    """Translate a canonical type name such as ``java.util.List<Long>``."""
    return dialect.spell(parse_type_name(canonical))
