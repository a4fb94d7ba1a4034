"""objxml codec: metadata-driven XML serialization."""

from .classify import describe as describe
from .classify import describe_value as describe_value
from .metadata import MetadataResolver as MetadataResolver
from .metadata import default_resolver as default_resolver
from .primitives import Char as Char
from .reader import Reader as Reader
from .runtime import CodecOptions as CodecOptions
from .runtime import XmlSerializer as XmlSerializer
from .runtime import decode_from_stream as decode_from_stream
from .runtime import decode_from_text as decode_from_text
from .runtime import encode_to_stream as encode_to_stream
from .runtime import encode_to_text as encode_to_text
from .serialization import *
from .types import *
from .writer import Writer as Writer
