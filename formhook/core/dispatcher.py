"""Dispatching of form submissions to external URLs."""

from typing import List, Optional

import httpx

from ..domain.enums import PresentationFormat, TransmissionFormat
from ..domain.models import DispatchConfiguration
from ..domain.submission import SubmissionContext
from ..logging import dispatch_context, get_logger
from .encoders import Pair, get_encoder
from .resolver import group_values, index_fields, resolve_field_value

logger = get_logger(__name__)


class Dispatcher:
    """Sends the mapped fields of a submission and reports the result.

    One call to :meth:`handle` makes at most one HTTP request. Transport
    failures are reported to the callback as failed results; exceptions raised
    by the callback itself propagate to the caller.
    """

    def __init__(self, transport: Optional[httpx.BaseTransport] = None):
        """Initialize dispatcher.

        Args:
            transport: Optional httpx transport used for every request
        """
        self.transport = transport

    def collect_pairs(
        self, configuration: DispatchConfiguration, context: SubmissionContext
    ) -> List[Pair]:
        """Resolve the configured fields into (name, value) pairs, in order."""
        fields_by_id = index_fields(context.form)
        values_by_id = group_values(context.data)

        pairs: List[Pair] = []
        for mapping in configuration.fields:
            if mapping.field_id not in fields_by_id:
                continue
            value = resolve_field_value(
                mapping.field_id,
                values_by_id,
                fields_by_id,
                PresentationFormat.TRANSMISSION,
            )
            if value is None:
                continue
            pairs.append((mapping.field_name, value))
        return pairs

    def handle(
        self, configuration: DispatchConfiguration, context: SubmissionContext
    ) -> None:
        """Send a submission according to a configuration."""
        transmission_format = TransmissionFormat.parse(configuration.transmission_format)
        if transmission_format is None:
            logger.debug(
                "Unrecognized transmission format, nothing sent",
                transmission_format=configuration.transmission_format,
            )
            return

        with dispatch_context(context.submission_id, transmission_format.value):
            pairs = self.collect_pairs(configuration, context)
            encoder = get_encoder(transmission_format, transport=self.transport)
            result = encoder.send(configuration.url, pairs, configuration.method)
            result = result.with_context(context)

            if configuration.callback is not None:
                configuration.callback.handle_result(result)


def dispatch(
    configuration: DispatchConfiguration,
    context: SubmissionContext,
    transport: Optional[httpx.BaseTransport] = None,
) -> None:
    """Send a submission with a one-off Dispatcher."""
    Dispatcher(transport=transport).handle(configuration, context)
