"""Enums for the formhook domain layer."""

from enum import Enum
from typing import Optional


class TransmissionFormat(str, Enum):
    """How field data is placed on the outgoing request."""

    QUERY_STRING = "Query String"
    FORM_BODY = "Form Body"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["TransmissionFormat"]:
        """Exact case-insensitive lookup; None for anything unrecognized."""
        if not value:
            return None
        wanted = value.casefold()
        for member in cls:
            if member.value.casefold() == wanted:
                return member
        return None


class PresentationFormat(str, Enum):
    """Contexts a form field may be asked to format its value for."""

    TRANSMISSION = "transmission"
    STORAGE = "storage"
    TEXT = "text"
    HTML = "html"
