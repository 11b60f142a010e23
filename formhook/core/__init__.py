"""Core dispatch logic for formhook.

No CLI concerns live here. Everything is usable from the submission pipeline
directly or through :class:`SendDataHandler`.
"""

from .codec import ConfigurationCodec, decode_configuration
from .dispatcher import Dispatcher, dispatch
from .encoders import FormBodyEncoder, QueryStringEncoder, get_encoder, merge_query
from .handler import FormHandlerType, SendDataHandler
from .resolver import group_values, index_fields, resolve_field_value

__all__ = [
    "ConfigurationCodec",
    "Dispatcher",
    "FormBodyEncoder",
    "FormHandlerType",
    "QueryStringEncoder",
    "SendDataHandler",
    "decode_configuration",
    "dispatch",
    "get_encoder",
    "group_values",
    "index_fields",
    "merge_query",
    "resolve_field_value",
]
