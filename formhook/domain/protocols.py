"""Protocol definitions for the collaborators around the dispatcher.

Form fields and forms come from the surrounding submission pipeline; result
callbacks come from plugins. Only the surface the dispatcher touches is
described here.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar, Optional, Protocol, Sequence, runtime_checkable
from uuid import UUID

from .enums import PresentationFormat

if TYPE_CHECKING:
    from .models import DispatchResult


@runtime_checkable
class FormField(Protocol):
    """A field defined on a form."""

    @property
    def id(self) -> UUID:
        ...

    @property
    def is_server_side_only(self) -> bool:
        """True when the server computes the value instead of the submitter."""
        ...

    def format_value(
        self, values: Optional[Sequence[str]], presentation: PresentationFormat
    ) -> Optional[str]:
        """Format raw values (None when nothing was submitted)."""
        ...


@runtime_checkable
class Form(Protocol):
    """A form definition."""

    @property
    def fields(self) -> Sequence[FormField]:
        ...


class ResultCallback(ABC):
    """Base interface for plugins reacting to the outcome of a dispatch.

    Implementations must be constructible without arguments and are declared
    with :func:`formhook.plugins.result_callback`.
    """

    # Identifier the class was declared under, set by the registry
    callback_id: ClassVar[Optional[str]] = None

    @abstractmethod
    def handle_result(self, result: "DispatchResult") -> None:
        """Handle the result of sending data.

        Exceptions raised here are not caught by the dispatcher.
        """
        pass
