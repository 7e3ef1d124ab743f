from __future__ import annotations

import datetime
import http.cookies
import typing
from email.utils import format_datetime
from urllib.parse import quote, unquote

from starlette.datastructures import MutableHeaders
from starlette.responses import Response
from starlette.types import Message

__all__ = [
    "CookieTransport",
    "ResponseTransport",
    "MessageTransport",
    "dump_cookie",
    "encode_cookie_value",
    "decode_cookies",
]


class CookieTransport(typing.Protocol):  # pragma: nocover
    """Outbound side of the HTTP layer that turns cookies into `Set-Cookie` headers."""

    @property
    def headers_sent(self) -> bool:
        ...

    def set_cookie(
        self,
        name: str,
        value: str,
        expires: int,
        path: str,
        domain: str | None,
        secure: bool,
    ) -> None:
        ...


def encode_cookie_value(value: str) -> str:
    """Percent-encode a cookie value so any unicode text fits into a latin-1 header."""
    return quote(value, safe="")


def decode_cookies(cookies: typing.Mapping[str, str]) -> dict[str, str]:
    """Reverse `encode_cookie_value` for every cookie of an incoming request."""
    return {name: unquote(value) for name, value in cookies.items()}


def _expires_to_datetime(expires: int) -> datetime.datetime:
    return datetime.datetime.fromtimestamp(expires, tz=datetime.timezone.utc)


def dump_cookie(
    name: str,
    value: str,
    expires: int = 0,
    path: str | None = "/",
    domain: str | None = None,
    secure: bool = False,
) -> str:
    """
    Serialize a cookie into a `Set-Cookie` header value.

    The value is percent-encoded. `expires` is an epoch timestamp, zero
    produces a session cookie.
    """
    cookie: http.cookies.BaseCookie[str] = http.cookies.SimpleCookie()
    cookie[name] = encode_cookie_value(value)
    if expires:
        cookie[name]["expires"] = format_datetime(_expires_to_datetime(expires), usegmt=True)
    if path is not None:
        cookie[name]["path"] = path
    if domain:
        cookie[name]["domain"] = domain
    if secure:
        cookie[name]["secure"] = True
    return cookie.output(header="").strip()


class ResponseTransport:
    """Writes cookies into a Starlette response that has not been sent yet."""

    def __init__(self, response: Response) -> None:
        self.response = response

    @property
    def headers_sent(self) -> bool:
        return False

    def set_cookie(
        self,
        name: str,
        value: str,
        expires: int,
        path: str,
        domain: str | None,
        secure: bool,
    ) -> None:
        self.response.set_cookie(
            key=name,
            value=encode_cookie_value(value),
            expires=_expires_to_datetime(expires) if expires else None,
            path=path,
            domain=domain,
            secure=secure,
        )


class MessageTransport:
    """
    Writes cookies into the headers of an ASGI `http.response.start` message.

    Call `close` once the message has been passed down the ASGI chain, after
    that the headers are considered sent and cannot be modified.
    """

    def __init__(self, message: Message) -> None:
        assert message["type"] == "http.response.start", "Only response start messages carry headers."
        self.message = message
        message.setdefault("headers", [])
        self._headers = MutableHeaders(scope=message)
        self._closed = False

    @property
    def headers_sent(self) -> bool:
        return self._closed

    def close(self) -> None:
        self._closed = True

    def set_cookie(
        self,
        name: str,
        value: str,
        expires: int,
        path: str,
        domain: str | None,
        secure: bool,
    ) -> None:
        if self._closed:
            raise RuntimeError("Cannot set cookie, response headers have already been sent.")
        self._headers.append("set-cookie", dump_cookie(name, value, expires, path, domain, secure))
