"""Encoders that place form data on an outgoing HTTP request.

Both encoders merge the field data into the query of the configured URL
(names are case-sensitive, the last value for a name wins) and differ only in
where the merged query ends up: the request URL or a form-encoded body.
Transport failures come back as failed :class:`DispatchResult` values.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import httpx

from ..config import get_config
from ..constants import FORM_CONTENT_TYPE, SEND_DATA_ERROR, USER_AGENT
from ..domain.enums import TransmissionFormat
from ..domain.models import DispatchResult
from ..logging import get_logger

logger = get_logger(__name__)

Pair = Tuple[str, str]
QueryMapping = Dict[str, List[str]]

TRANSPORT_ERRORS = (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError, ValueError)


def merge_query(
    url: str, pairs: Iterable[Pair], include_url_query: bool = True
) -> Tuple[str, QueryMapping]:
    """Overlay name/value pairs on the query of a URL.

    Args:
        url: Configured URL, possibly with a query
        pairs: Outgoing (name, value) pairs in order
        include_url_query: Start from the URL's own query parameters

    Returns:
        The URL without query or fragment, and the merged parameters
    """
    parts = urlsplit(url)
    merged: QueryMapping = {}

    if include_url_query:
        for name, value in parse_qsl(parts.query, keep_blank_values=True):
            merged.setdefault(name, []).append(value)

    for name, value in pairs:
        merged[name] = [value]

    bare_url = urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
    return bare_url, merged


def encode_query(merged: QueryMapping) -> str:
    """Serialize merged parameters as application/x-www-form-urlencoded."""
    return urlencode(merged, doseq=True)


def flatten_query(merged: QueryMapping) -> Dict[str, str]:
    """Single name->value view of merged parameters (last value per name)."""
    return {name: values[-1] for name, values in merged.items() if values}


def _check_target(url: str, method: str) -> None:
    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ValueError(f"Request URL must be an absolute http(s) URL: {url!r}")
    if not method or not method.strip():
        raise ValueError("HTTP method is not configured")


class Encoder(ABC):
    """Sends form data with one transmission format."""

    transmission_format: TransmissionFormat

    def __init__(
        self,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize encoder.

        Args:
            timeout: Request timeout in seconds (defaults to config)
            transport: Optional httpx transport (e.g. httpx.MockTransport)
        """
        self.timeout = timeout if timeout is not None else get_config().request_timeout
        self.transport = transport

    @abstractmethod
    def build_request(
        self, client: httpx.Client, url: str, pairs: List[Pair], method: str
    ) -> httpx.Request:
        """Build the outgoing request."""
        pass

    def send(self, url: str, pairs: Iterable[Pair], method: str) -> DispatchResult:
        """Send form data and capture the outcome.

        Returns:
            Successful result with the response text, or a failed result
            carrying the exception
        """
        pairs = list(pairs)
        try:
            with httpx.Client(
                transport=self.transport,
                timeout=self.timeout,
                follow_redirects=False,
                headers={"User-Agent": USER_AGENT},
            ) as client:
                request = self.build_request(client, url, pairs, method)
                response = client.send(request)
                # Redirects are not followed and count as delivered
                if response.is_error:
                    response.raise_for_status()
                response_text = response.text

        except TRANSPORT_ERRORS as e:
            logger.error(
                SEND_DATA_ERROR,
                url=url,
                method=method,
                transmission_format=self.transmission_format.value,
                error=str(e),
                exc_info=e,
            )
            return DispatchResult.fail(e)

        logger.info(
            "Form data sent",
            url=str(request.url),
            method=request.method,
            status=response.status_code,
        )
        return DispatchResult.ok(response_text, response)


class QueryStringEncoder(Encoder):
    """Sends the data in the query string, without a body."""

    transmission_format = TransmissionFormat.QUERY_STRING

    def build_request(
        self, client: httpx.Client, url: str, pairs: List[Pair], method: str
    ) -> httpx.Request:
        bare_url, merged = merge_query(url, pairs)
        _check_target(bare_url, method)

        query = encode_query(merged)
        request_url = f"{bare_url}?{query}" if query else bare_url
        return client.build_request(method, request_url)


class FormBodyEncoder(Encoder):
    """Sends the data as an application/x-www-form-urlencoded body.

    By default the URL's own query parameters are moved into the body along
    with the field data. With ``merge_url_query=False`` they stay on the URL.
    """

    transmission_format = TransmissionFormat.FORM_BODY

    def __init__(
        self,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
        merge_url_query: Optional[bool] = None,
    ):
        super().__init__(timeout=timeout, transport=transport)
        if merge_url_query is None:
            merge_url_query = get_config().merge_url_query_into_body
        self.merge_url_query = merge_url_query

    def build_request(
        self, client: httpx.Client, url: str, pairs: List[Pair], method: str
    ) -> httpx.Request:
        bare_url, merged = merge_query(url, pairs, include_url_query=self.merge_url_query)
        _check_target(bare_url, method)

        if self.merge_url_query:
            request_url = bare_url
        else:
            request_url = urlunsplit(urlsplit(url)._replace(fragment=""))

        if method.strip().upper() in ("GET", "HEAD"):
            logger.warning("Sending a form body with a bodiless method", method=method)

        body = encode_query(merged).encode("ascii")
        headers = {
            "Content-Type": FORM_CONTENT_TYPE,
            "Content-Length": str(len(body)),
        }
        return client.build_request(method, request_url, content=body, headers=headers)


ENCODERS = {
    TransmissionFormat.QUERY_STRING: QueryStringEncoder,
    TransmissionFormat.FORM_BODY: FormBodyEncoder,
}


def get_encoder(
    transmission_format: TransmissionFormat,
    transport: Optional[httpx.BaseTransport] = None,
) -> Encoder:
    """Create the encoder for a transmission format."""
    return ENCODERS[transmission_format](transport=transport)
