"""Decoding and encoding of send data handler configurations.

Stored configurations look like::

    {
        "fields": [{"id": "<guid>", "name": "email"}],
        "resultHandler": "my_plugins.crm.LeadCallback",
        "url": "https://example.test/hook",
        "method": "POST",
        "transmissionFormat": "Query String"
    }

Every key is optional. A ``resultHandler`` that is not installed leaves the
configuration without a callback instead of failing.
"""

import json
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
from urllib.parse import urlsplit
from uuid import UUID

from ..domain.models import DispatchConfiguration, FieldMapping
from ..errors import MalformedConfigurationError
from ..logging import get_logger
from ..plugins import CallbackRegistry, get_registry

logger = get_logger(__name__)

Document = Union[str, bytes, Mapping[str, Any]]


class ConfigurationCodec:
    """Converts between stored documents and DispatchConfiguration."""

    def __init__(self, registry: CallbackRegistry):
        self.registry = registry

    def decode(self, document: Document) -> DispatchConfiguration:
        """Decode a configuration document.

        Args:
            document: Parsed document, or its JSON text

        Returns:
            The decoded configuration

        Raises:
            MalformedConfigurationError: If a present key has the wrong shape
        """
        data = _load_document(document)
        values: Dict[str, Any] = {}

        fields = data.get("fields")
        if fields is not None:
            values["fields"] = _decode_fields(fields)

        handler_id = _optional_string(data, "resultHandler")
        if handler_id:
            values["result_handler"] = handler_id
            values["callback"] = self.registry.resolve(handler_id)
            if values["callback"] is None:
                logger.info("Result callback not installed", identifier=handler_id)

        url = _optional_string(data, "url")
        if url is not None:
            if url:
                _check_url(url)
            values["url"] = url

        method = _optional_string(data, "method")
        if method is not None:
            values["method"] = method

        transmission_format = _optional_string(data, "transmissionFormat")
        if transmission_format is not None:
            values["transmission_format"] = transmission_format

        return DispatchConfiguration(**values)

    def encode(self, configuration: DispatchConfiguration) -> Dict[str, Any]:
        """Encode a configuration into its document shape."""
        return configuration.to_document()


def decode_configuration(
    document: Document, registry: Optional[CallbackRegistry] = None
) -> DispatchConfiguration:
    """Decode a configuration using the process-wide callback registry by default."""
    if registry is None:
        registry = get_registry()
    return ConfigurationCodec(registry).decode(document)


def _load_document(document: Document) -> Mapping[str, Any]:
    if isinstance(document, (str, bytes)):
        try:
            document = json.loads(document)
        except ValueError as e:
            raise MalformedConfigurationError(f"Configuration is not valid JSON: {e}") from e

    if not isinstance(document, Mapping):
        raise MalformedConfigurationError(
            f"Configuration must be an object, got {type(document).__name__}"
        )
    return document


def _optional_string(data: Mapping[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise MalformedConfigurationError(
            f"'{key}' must be a string, got {type(value).__name__}", key=key
        )
    return value


def _decode_fields(fields: Any) -> Tuple[FieldMapping, ...]:
    if not isinstance(fields, list):
        raise MalformedConfigurationError(
            f"'fields' must be an array, got {type(fields).__name__}", key="fields"
        )

    mappings: List[FieldMapping] = []
    for index, entry in enumerate(fields):
        path = f"fields[{index}]"
        if not isinstance(entry, Mapping):
            raise MalformedConfigurationError(f"{path} must be an object", key=path)

        raw_id = entry.get("id")
        if not isinstance(raw_id, str):
            raise MalformedConfigurationError(f"{path} is missing 'id'", key=f"{path}.id")
        try:
            field_id = UUID(raw_id)
        except ValueError as e:
            raise MalformedConfigurationError(
                f"{path}.id is not a valid GUID: {raw_id!r}", key=f"{path}.id"
            ) from e

        name = entry.get("name")
        if not isinstance(name, str):
            raise MalformedConfigurationError(
                f"{path} is missing 'name'", key=f"{path}.name"
            )

        mappings.append(FieldMapping(field_id=field_id, field_name=name))

    return tuple(mappings)


def _check_url(url: str) -> None:
    try:
        parts = urlsplit(url)
        # Port is parsed lazily; out-of-range values only raise here
        parts.port
    except ValueError as e:
        raise MalformedConfigurationError(f"'url' is not a valid URL: {url!r}", key="url") from e

    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise MalformedConfigurationError(
            f"'url' must be an absolute http(s) URL: {url!r}", key="url"
        )
