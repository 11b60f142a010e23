"""Form handler types.

A form definition stores, per handler, the handler type id and its serialized
configuration. The submission pipeline deserializes the configuration, calls
``prepare_handle_form`` before the submission is stored and ``handle_form``
after.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional
from uuid import UUID

import httpx

from ..constants import SEND_DATA_HANDLER_TYPE_ID
from ..domain.models import DispatchConfiguration
from ..domain.submission import SubmissionContext
from ..plugins import CallbackRegistry, get_registry
from .codec import ConfigurationCodec, Document
from .dispatcher import Dispatcher


class FormHandlerType(ABC):
    """Base interface for form handler types."""

    @property
    @abstractmethod
    def type_id(self) -> UUID:
        """Identifier of the handler type (used in stored form definitions)."""
        pass

    @property
    @abstractmethod
    def type_label(self) -> str:
        """Label shown when choosing the handler."""
        pass

    icon: str = ""
    directive: str = ""

    @abstractmethod
    def deserialize_configuration(self, document: Document) -> Any:
        pass

    @abstractmethod
    def prepare_handle_form(self, context: SubmissionContext, configuration: Any) -> None:
        pass

    @abstractmethod
    def handle_form(self, context: SubmissionContext, configuration: Any) -> None:
        pass


class SendDataHandler(FormHandlerType):
    """A handler that sends form data to a web API."""

    icon = "icon-formulate-send-data"
    directive = "formulate-send-data-handler"

    def __init__(
        self,
        registry: Optional[CallbackRegistry] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self._registry = registry
        self.dispatcher = Dispatcher(transport=transport)

    @property
    def type_id(self) -> UUID:
        return UUID(SEND_DATA_HANDLER_TYPE_ID)

    @property
    def type_label(self) -> str:
        return "Send Data"

    @property
    def registry(self) -> CallbackRegistry:
        if self._registry is None:
            self._registry = get_registry()
        return self._registry

    def deserialize_configuration(self, document: Document) -> DispatchConfiguration:
        return ConfigurationCodec(self.registry).decode(document)

    def prepare_handle_form(
        self, context: SubmissionContext, configuration: DispatchConfiguration
    ) -> None:
        # Nothing to prepare
        pass

    def handle_form(
        self, context: SubmissionContext, configuration: DispatchConfiguration
    ) -> None:
        self.dispatcher.handle(configuration, context)
