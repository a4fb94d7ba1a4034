"""Unit tests configuration file."""

import pytest

from objxml.codec import MetadataResolver, Reader, Writer


def pytest_configure(config):
    """Disable verbose output when running tests."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


@pytest.fixture
def resolver():
    """A resolver with an empty cache, isolated from the process-wide one."""
    return MetadataResolver()


@pytest.fixture
def writer(resolver):
    return Writer(resolver)


@pytest.fixture
def reader(resolver):
    return Reader(resolver)
