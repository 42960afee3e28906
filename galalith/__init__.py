"""Galalith - multi-target code generator for a binary serialization protocol."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("galalith")
except PackageNotFoundError:
    __version__ = "(local)"
