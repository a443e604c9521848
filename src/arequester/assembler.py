r"""Pure functions that turn a ``RequestSpec`` into wire values.

``assemble_url`` and ``assemble_headers`` are deterministic: the same
spec always yields byte-identical output. The only side effect is
optional diagnostic logging.
"""

from __future__ import annotations

__all__ = [
    "BODYLESS_METHODS",
    "assemble_endpoint",
    "assemble_headers",
    "assemble_url",
    "serialize_payload",
]

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

from arequester.core.config import DEFAULT_CONTENT_TYPE
from arequester.exceptions import InvalidEndpointValueError

if TYPE_CHECKING:
    from arequester.request_spec import RequestSpec
    from arequester.utils.diagnostics import DiagnosticLogger

# Methods that never carry a request body
BODYLESS_METHODS = frozenset({"GET", "HEAD"})

_RESERVED_HEADERS = ("content-type", "authorization", "accept-language")


def assemble_endpoint(endpoint: str | Mapping[str, Any]) -> str:
    """Build the path part of a URL.

    Args:
        endpoint: A path string, or an ordered mapping whose values are
            path segments. Keys are ignored.

    Returns:
        The path, starting with ``/``.

    Raises:
        InvalidEndpointValueError: If a mapping value is not a string.

    Example:
        ```pycon
        >>> from arequester.assembler import assemble_endpoint
        >>> assemble_endpoint("/user/login/")
        '/user/login'
        >>> assemble_endpoint({"route": "/user", "controller": "login/"})
        '/user/login'

        ```
    """
    if isinstance(endpoint, Mapping):
        segments = []
        for key, value in endpoint.items():
            if not isinstance(value, str):
                raise InvalidEndpointValueError(key, value)
            segments.append(f"/{_trim_slash(value)}")
        return "".join(segments)
    return f"/{_trim_slash(endpoint)}"


def assemble_url(spec: RequestSpec, diagnostics: DiagnosticLogger | None = None) -> str:
    """Build the canonical URL of a request.

    The URL is ``protocol://host[:port]`` followed by the endpoint path
    and, when query parameters are set, ``?`` and the form encoded query.
    A sequence value is sent as one repeated key per item.

    Args:
        spec: The request configuration.
        diagnostics: Optional diagnostic logger.

    Returns:
        The URL string.

    Raises:
        InvalidEndpointValueError: If an endpoint mapping value is not a
            string.

    Example:
        ```pycon
        >>> from arequester.assembler import assemble_url
        >>> from arequester.request_spec import RequestSpec
        >>> spec = RequestSpec(
        ...     base_url="api.example.com",
        ...     endpoint={"route": "user", "controller": "login"},
        ...     protocol="https",
        ...     query={"page": "2"},
        ... )
        >>> assemble_url(spec)
        'https://api.example.com/user/login?page=2'

        ```
    """
    origin = f"{spec.protocol}://{spec.base_url}"
    if spec.port is not None:
        origin = f"{origin}:{spec.port}"
    url = origin + assemble_endpoint(spec.endpoint)
    if spec.query:
        url = f"{url}?{urlencode(spec.query, doseq=True)}"
    if diagnostics is not None:
        diagnostics.debug("assemble_url", "Generated request URL", url=url)
    return url


def assemble_headers(
    spec: RequestSpec, diagnostics: DiagnosticLogger | None = None
) -> dict[str, str]:
    """Build the header mapping of a request.

    Custom headers are copied first. ``Content-Type`` is then always set
    (``application/json`` unless overridden), ``Authorization`` is set
    only when an access token is present and ``Accept-Language`` only
    when a response language is present. These three keys replace any
    custom header with the same name, whatever its case.

    Args:
        spec: The request configuration.
        diagnostics: Optional diagnostic logger.

    Returns:
        A new header dictionary.

    Example:
        ```pycon
        >>> from arequester.assembler import assemble_headers
        >>> from arequester.request_spec import RequestSpec
        >>> assemble_headers(RequestSpec(base_url="api.example.com", access_token="abc"))
        {'Content-Type': 'application/json', 'Authorization': 'Bearer abc'}

        ```
    """
    has_token = spec.access_token is not None and spec.access_token != ""
    headers = {
        key: value
        for key, value in spec.custom_headers.items()
        if key.lower() not in _RESERVED_HEADERS
        or (key.lower() == "authorization" and not has_token)
        or (key.lower() == "accept-language" and not spec.response_lang)
    }
    headers["Content-Type"] = spec.content_type or DEFAULT_CONTENT_TYPE
    if has_token:
        headers["Authorization"] = f"Bearer {spec.access_token}"
    if spec.response_lang:
        headers["Accept-Language"] = spec.response_lang
    if diagnostics is not None:
        diagnostics.debug("assemble_headers", "Generated headers", headers=sorted(headers))
    return headers


def serialize_payload(method: str, payload: Any, content_type: str | None = None) -> bytes | None:
    """Serialize a payload into a request body.

    Args:
        method: The HTTP method. ``GET`` and ``HEAD`` never get a body.
        payload: The payload to send. ``None`` means no body.
        content_type: The ``Content-Type`` of the request. Defaults to
            ``application/json``.

    Returns:
        The body bytes, or ``None`` when no body is sent.

    Example:
        ```pycon
        >>> from arequester.assembler import serialize_payload
        >>> serialize_payload("POST", {"name": "ada"})
        b'{"name": "ada"}'
        >>> serialize_payload("GET", {"name": "ada"}) is None
        True

        ```
    """
    if method.upper() in BODYLESS_METHODS or payload is None:
        return None
    if isinstance(payload, (bytes, bytearray)):
        return bytes(payload)
    media_type = (content_type or DEFAULT_CONTENT_TYPE).split(";")[0].strip().lower()
    if media_type.endswith("json"):
        return json.dumps(payload).encode("utf-8")
    if media_type == "application/x-www-form-urlencoded" and isinstance(payload, Mapping):
        return urlencode(payload).encode("utf-8")
    if isinstance(payload, str):
        return payload.encode("utf-8")
    return json.dumps(payload).encode("utf-8")


def _trim_slash(value: str) -> str:
    # Only one leading and one trailing slash are removed
    if value.startswith("/"):
        value = value[1:]
    if value.endswith("/"):
        value = value[:-1]
    return value
