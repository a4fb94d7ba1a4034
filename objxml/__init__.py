"""objxml - Metadata-driven object graph serialization to XML."""

from importlib.metadata import PackageNotFoundError, version

from .codec import *

try:
    __version__ = version("objxml")
except PackageNotFoundError:
    __version__ = "(local)"
