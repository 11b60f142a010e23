"""Field value resolution for outgoing form data."""

from typing import Dict, List, Mapping, Optional, Sequence
from uuid import UUID

from ..domain.enums import PresentationFormat
from ..domain.protocols import Form, FormField
from ..domain.submission import FieldSubmission


def index_fields(form: Form) -> Dict[UUID, FormField]:
    """Index a form's fields by identifier."""
    return {form_field.id: form_field for form_field in form.fields}


def group_values(data: Sequence[FieldSubmission]) -> Dict[UUID, List[str]]:
    """Group submitted values by field, keeping submission order."""
    values_by_id: Dict[UUID, List[str]] = {}
    for submission in data:
        values_by_id.setdefault(submission.field_id, []).extend(submission.field_values)
    return values_by_id


def resolve_field_value(
    field_id: UUID,
    values_by_id: Mapping[UUID, Sequence[str]],
    fields_by_id: Mapping[UUID, FormField],
    presentation: PresentationFormat = PresentationFormat.TRANSMISSION,
) -> Optional[str]:
    """Format the value of one field.

    Server-side only fields are formatted even when nothing was submitted for
    them (with ``None`` as the values) so they can supply their own value.

    Returns:
        The formatted value, or None if the field should not be sent
    """
    form_field = fields_by_id.get(field_id)
    if form_field is None:
        return None

    values = values_by_id.get(field_id)
    if values is not None:
        return form_field.format_value(list(values), presentation)
    if form_field.is_server_side_only:
        return form_field.format_value(None, presentation)
    return None
