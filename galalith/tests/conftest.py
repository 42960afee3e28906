"""Unit tests configuration file."""

import json
import os

import pytest

from galalith.generator.parser import load_registry, load_registry_file

FILE_DIR = os.path.dirname(os.path.realpath(__file__))


def pytest_configure(config):
    """Disable verbose output when running tests."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


@pytest.fixture
def registry_file():
    return f"{FILE_DIR}/generator/registry.json"


@pytest.fixture
def game_registry(registry_file):
    """Registry with nested messages, containers and compatible fields."""
    return load_registry_file(registry_file)


@pytest.fixture
def make_registry():
    """Build a registry from message dicts in registry file format."""

    def make(*messages):
        return load_registry(json.dumps({"messages": list(messages)}))

    return make
