"""Domain layer for formhook: configuration, results and submission types."""

from .enums import PresentationFormat, TransmissionFormat
from .models import DispatchConfiguration, DispatchResult, FieldMapping
from .protocols import Form, FormField, ResultCallback
from .submission import (
    FieldSubmission,
    SimpleForm,
    StaticField,
    SubmissionContext,
    TextField,
)

__all__ = [
    "DispatchConfiguration",
    "DispatchResult",
    "FieldMapping",
    "FieldSubmission",
    "Form",
    "FormField",
    "PresentationFormat",
    "ResultCallback",
    "SimpleForm",
    "StaticField",
    "SubmissionContext",
    "TextField",
    "TransmissionFormat",
]
