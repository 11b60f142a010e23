"""Form submission models handed to the dispatcher."""

from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple
from uuid import UUID

from .enums import PresentationFormat
from .protocols import Form, FormField


@dataclass(frozen=True)
class FieldSubmission:
    """Values submitted for one field."""

    field_id: UUID
    field_values: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SubmissionContext:
    """Everything known about a form submission being handled."""

    form: Form
    data: Sequence[FieldSubmission] = ()
    submission_id: Optional[str] = None
    page_id: Optional[int] = None


@dataclass(frozen=True)
class TextField:
    """Plain text field: values joined with a comma."""

    id: UUID
    alias: str = ""
    is_server_side_only: bool = False

    def format_value(
        self, values: Optional[Sequence[str]], presentation: PresentationFormat
    ) -> Optional[str]:
        if values is None:
            return None
        return ", ".join(values)


@dataclass(frozen=True)
class StaticField:
    """Server-side field that always yields a fixed value."""

    id: UUID
    value: str
    alias: str = ""
    is_server_side_only: bool = True

    def format_value(
        self, values: Optional[Sequence[str]], presentation: PresentationFormat
    ) -> Optional[str]:
        return self.value


@dataclass(frozen=True)
class SimpleForm:
    """A form made of an ordered list of fields."""

    fields: Tuple[FormField, ...] = field(default_factory=tuple)
    name: str = ""
