"""Output locations of generated protocol files."""

import posixpath
import re

from .types import ProtocolRegistration


def protocol_path(registration: ProtocolRegistration) -> str:
    """Slash separated module path of a message, empty for the root."""
    return "/".join(s for s in re.split(r"[./\\]+", registration.module) if s)


def capitalized_path(registration: ProtocolRegistration) -> str:
    """Module path with every segment capitalized (``game/item`` -> ``Game/Item``)."""
    return "/".join(s[:1].upper() + s[1:] for s in protocol_path(registration).split("/") if s)


def join_path(*parts: str) -> str:
    """Join path parts, dropping empty parts and collapsing repeated separators."""
    return re.sub(r"/{2,}", "/", "/".join(p for p in parts if p))


def relative_path(from_dir: str, to_dir: str) -> str:
    """Relative import prefix from one module directory to another.

    Always starts with ``.``: ``./`` when ``to_dir`` is ``from_dir`` or below
    it, ``../`` otherwise.
    """
    rel = posixpath.relpath(to_dir or ".", from_dir or ".")
    if rel == ".":
        return "."
    if rel.startswith(".."):
        return rel
    return f"./{rel}"
