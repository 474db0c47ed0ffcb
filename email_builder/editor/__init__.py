"""Editor session state and document loading."""

from .configuration import (
    encode_configuration_hash,
    get_configuration,
    get_configuration_from_api,
    load_sample,
)
from .session import EditorSession

__all__ = [
    "EditorSession",
    "encode_configuration_hash",
    "get_configuration",
    "get_configuration_from_api",
    "load_sample",
]
