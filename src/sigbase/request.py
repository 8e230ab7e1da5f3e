from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union
from urllib.parse import SplitResult, parse_qsl, urlsplit

from http_message_signatures.structures import CaseInsensitiveDict

DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass
class Request:
    """A framework-agnostic representation of an HTTP request.

    Headers are looked up case-insensitively; a plain mapping passed as
    headers is copied into a CaseInsensitiveDict.
    """

    method: str
    url: str
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: Optional[Union[str, bytes]] = None

    def __post_init__(self):
        if not isinstance(self.headers, CaseInsensitiveDict):
            self.headers = CaseInsensitiveDict(self.headers or {})

    @property
    def url_parts(self) -> SplitResult:
        return urlsplit(self.url)

    @property
    def scheme(self) -> str:
        return self.url_parts.scheme.lower()

    @property
    def authority(self) -> str:
        """Host of the URL, followed by the port when it is not the default
        port of the scheme. User information is never included."""
        parts = self.url_parts
        host = (parts.hostname or "").lower()
        if ":" in host:
            host = f"[{host}]"
        port = parts.port
        if port is not None and port != DEFAULT_PORTS.get(self.scheme):
            return f"{host}:{port}"
        return host

    @property
    def path(self) -> str:
        return self.url_parts.path or "/"

    @property
    def query(self) -> str:
        """Query string with its leading "?", or an empty string when the URL
        has no query (or an empty one)."""
        query = self.url_parts.query
        return f"?{query}" if query else ""

    @property
    def query_params(self) -> List[Tuple[str, str]]:
        return parse_qsl(self.url_parts.query, keep_blank_values=True)

    def query_param(self, name: str) -> Optional[str]:
        """Returns the first value of the named query parameter."""
        for key, value in self.query_params:
            if key == name:
                return value
        return None

    def header(self, name: str) -> Optional[str]:
        value = self.headers.get(name)
        if value is None:
            return None
        if isinstance(value, bytes):
            value = value.decode("latin-1")
        return str(value).strip()

    @property
    def body_bytes(self) -> bytes:
        if self.body is None:
            return b""
        if isinstance(self.body, str):
            return self.body.encode()
        return bytes(self.body)

