"""Send data configuration and result models."""

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple
from uuid import UUID

import httpx
from pydantic import BaseModel, ConfigDict, Field

from .protocols import ResultCallback
from .submission import SubmissionContext


class FieldMapping(BaseModel):
    """Maps a form field to the name it is sent under."""

    model_config = ConfigDict(frozen=True)

    field_id: UUID = Field(..., description="Form field identifier")
    field_name: str = Field(..., description="Parameter name on the wire")


class DispatchConfiguration(BaseModel):
    """Configuration of a send data handler."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    fields: Tuple[FieldMapping, ...] = ()
    url: str = ""
    method: str = ""
    transmission_format: str = ""
    result_handler: Optional[str] = Field(
        None, description="Callback identifier as configured"
    )
    callback: Optional[ResultCallback] = Field(
        None, description="Resolved callback, None when unset or not installed"
    )

    def to_document(self) -> Dict[str, Any]:
        """Serialize back to the stored document shape."""
        document: Dict[str, Any] = {
            "fields": [
                {"id": str(mapping.field_id), "name": mapping.field_name}
                for mapping in self.fields
            ],
            "url": self.url,
            "method": self.method,
            "transmissionFormat": self.transmission_format,
        }
        if self.result_handler:
            document["resultHandler"] = self.result_handler
        return document


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of one attempt to send data.

    On success ``response_text`` and ``raw_response`` are set; on failure only
    ``error`` is. ``context`` is attached once the HTTP phase is over.
    """

    success: bool
    response_text: Optional[str] = None
    raw_response: Optional[httpx.Response] = None
    error: Optional[BaseException] = None
    context: Optional[SubmissionContext] = None

    @classmethod
    def ok(cls, response_text: str, raw_response: httpx.Response) -> "DispatchResult":
        """Create a successful result."""
        return cls(success=True, response_text=response_text, raw_response=raw_response)

    @classmethod
    def fail(cls, error: BaseException) -> "DispatchResult":
        """Create a failed result."""
        return cls(success=False, error=error)

    def with_context(self, context: Optional[SubmissionContext]) -> "DispatchResult":
        return replace(self, context=context)

    @property
    def status_code(self) -> Optional[int]:
        if self.raw_response is None:
            return None
        return self.raw_response.status_code
