"""Formhook: send form submissions to external URLs.

Quick Start:
    >>> from formhook import SendDataHandler
    >>> handler = SendDataHandler()
    >>> config = handler.deserialize_configuration(stored_json)
    >>> handler.handle_form(submission_context, config)
"""

# Version
__version__ = "1.0.0"

from formhook.config import get_config
from formhook.core import (
    ConfigurationCodec,
    Dispatcher,
    SendDataHandler,
    decode_configuration,
    dispatch,
)
from formhook.domain import (
    DispatchConfiguration,
    DispatchResult,
    FieldMapping,
    FieldSubmission,
    PresentationFormat,
    ResultCallback,
    SubmissionContext,
    TransmissionFormat,
)
from formhook.errors import (
    DuplicateCallbackError,
    FormhookError,
    MalformedConfigurationError,
)
from formhook.plugins import CallbackRegistry, get_registry, result_callback

__all__ = [
    "__version__",
    # Core
    "ConfigurationCodec",
    "Dispatcher",
    "SendDataHandler",
    "decode_configuration",
    "dispatch",
    # Models
    "DispatchConfiguration",
    "DispatchResult",
    "FieldMapping",
    "FieldSubmission",
    "PresentationFormat",
    "SubmissionContext",
    "TransmissionFormat",
    # Callbacks
    "CallbackRegistry",
    "ResultCallback",
    "get_registry",
    "result_callback",
    # Errors
    "DuplicateCallbackError",
    "FormhookError",
    "MalformedConfigurationError",
    # Config
    "get_config",
]
