"""Jinja2 environment and fixed slot contracts for target templates."""

from collections.abc import Sequence
from dataclasses import dataclass

from jinja2 import Environment, PackageLoader, TemplateNotFound, meta

from .errors import TemplateError

env = Environment(
    loader=PackageLoader("galalith.generator", "templates"),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    line_comment_prefix="%%",
    line_statement_prefix="%",
)


@dataclass(frozen=True)
class TemplateContract:
    """A template asset together with its ordered substitution slots.

    Values are supplied positionally; the slot names only bind them to the
    template variables.
    """

    name: str
    slots: tuple[str, ...]

    def _source(self) -> str:
        try:
            source, _, _ = env.loader.get_source(env, self.name)  # type: ignore[union-attr]
        except TemplateNotFound as e:
            raise TemplateError(f"Template {self.name} not found") from e
        return source

    def verify(self) -> None:
        """Check that the template uses exactly the declared slots."""
        used = meta.find_undeclared_variables(env.parse(self._source()))
        declared = set(self.slots)
        if used != declared:
            missing = ", ".join(sorted(used - declared)) or "-"
            unused = ", ".join(sorted(declared - used)) or "-"
            raise TemplateError(
                f"Template {self.name} does not match its slots "
                f"(undeclared: {missing}; unused: {unused})"
            )

    def render(self, values: Sequence[str]) -> str:
        if len(values) != len(self.slots):
            raise TemplateError(
                f"Template {self.name} takes {len(self.slots)} values, got {len(values)}"
            )
        try:
            template = env.get_template(self.name)
        except TemplateNotFound as e:
            raise TemplateError(f"Template {self.name} not found") from e
        return template.render(dict(zip(self.slots, values, strict=True)))
