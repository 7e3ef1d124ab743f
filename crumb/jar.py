from __future__ import annotations

import logging
import time
import typing

from starlette.requests import HTTPConnection

from crumb.exceptions import ImproperlyConfigured, PayloadTooLarge
from crumb.signing import CookieSigner
from crumb.structures import CookieEntry
from crumb.transports import CookieTransport

__all__ = ["CookieJar", "FOREVER_MINUTES", "EXPIRED_MINUTES", "MAX_COOKIE_SIZE"]

logger = logging.getLogger(__name__)

FOREVER_MINUTES = 525600  # one year
EXPIRED_MINUTES = -2000
MAX_COOKIE_SIZE = 4000

_T = typing.TypeVar("_T")


class CookieJar:
    """
    Buffers outgoing cookies for a single request.

    Writes are kept in the jar until `send` is called. Reads look at the jar
    first and then at the signed cookies that came with the request.
    Incoming cookies are never copied into the jar.

    Example:
        jar = CookieJar(CookieSigner("secret"), request.cookies)
        jar.put("theme", "dark", 20)
        jar.get("theme")  # "dark"
        jar.send(ResponseTransport(response))
    """

    def __init__(
        self,
        signer: CookieSigner,
        incoming: typing.Mapping[str, str] | None = None,
        clock: typing.Callable[[], float] = time.time,
    ) -> None:
        self.signer = signer
        self.incoming = incoming if incoming is not None else {}
        self.clock = clock
        self.entries: dict[str, CookieEntry] = {}

    def put(
        self,
        name: str,
        value: str | None,
        lifetime_minutes: int = 0,
        path: str = "/",
        domain: str | None = None,
        secure: bool = False,
    ) -> None:
        """Queue a cookie. A previously queued cookie with the same name is replaced."""
        self.entries[name] = CookieEntry(
            name=name,
            value=value,
            lifetime_minutes=lifetime_minutes,
            path=path,
            domain=domain,
            secure=secure,
        )

    def forever(
        self,
        name: str,
        value: str | None,
        path: str = "/",
        domain: str | None = None,
        secure: bool = False,
    ) -> None:
        """Queue a cookie that lives for one year."""
        self.put(name, value, FOREVER_MINUTES, path, domain, secure)

    def forget(self, name: str, path: str = "/", domain: str | None = None, secure: bool = False) -> None:
        """Queue an already expired, empty cookie so the client removes it."""
        self.put(name, None, EXPIRED_MINUTES, path, domain, secure)

    @typing.overload
    def get(self, name: str) -> str | None:  # pragma: no cover
        ...

    @typing.overload
    def get(self, name: str, default: _T) -> str | _T:  # pragma: no cover
        ...

    @typing.overload
    def get(self, name: str, *, default_factory: typing.Callable[[], _T]) -> str | _T:  # pragma: no cover
        ...

    def get(
        self,
        name: str,
        default: typing.Any = None,
        *,
        default_factory: typing.Callable[[], typing.Any] | None = None,
    ) -> typing.Any:
        """
        Get cookie value.

        Values queued in the jar are returned as is. Incoming cookies are
        returned only when their signature is valid, tampered cookies are
        treated as missing. `default_factory` is called only when no value
        can be resolved.
        """
        if name in self.entries:
            return self.entries[name].value

        signed_value = self.incoming.get(name)
        if signed_value is not None:
            ok, value = self.signer.safe_unsign(name, signed_value)
            if ok:
                return value

        if default_factory is not None:
            return default_factory()
        return default

    def has(self, name: str) -> bool:
        return self.get(name) is not None

    def send(self, transport: CookieTransport) -> bool:
        """
        Write all queued cookies to the transport.

        Returns False and writes nothing if the response headers are already
        sent. Every cookie is signed and measured before the first one is
        written, so an oversized cookie raises PayloadTooLarge and the
        transport receives none of them. The jar is not cleared.

        The size limit applies to the signed value before the transport
        encodes it, the header written to the client may be longer.
        """
        if transport.headers_sent:
            logger.warning("Cannot send %d cookie(s), response headers have already been sent.", len(self.entries))
            return False

        now = self.clock()
        prepared: list[tuple[CookieEntry, str, int]] = []
        for entry in self.entries.values():
            signed_value = self.signer.sign(entry.name, entry.value)
            size = len(signed_value.encode("utf-8"))
            if size > MAX_COOKIE_SIZE:
                raise PayloadTooLarge(entry.name, size, MAX_COOKIE_SIZE)
            prepared.append((entry, signed_value, entry.expires_at(now)))

        for entry, signed_value, expires in prepared:
            transport.set_cookie(entry.name, signed_value, expires, entry.path, entry.domain, entry.secure)

        logger.debug("Sent %d cookie(s).", len(prepared))
        return True

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def __iter__(self) -> typing.Iterator[CookieEntry]:
        return iter(self.entries.values())

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}: pending={list(self.entries)}>"

    @classmethod
    def of(cls, connection: HTTPConnection) -> CookieJar:
        """Return the jar attached to the request by CookieJarMiddleware."""
        jar = getattr(connection.state, "cookie_jar", None)
        if jar is None:
            raise ImproperlyConfigured("Cookie jar is not available. Did you install CookieJarMiddleware?")
        return typing.cast(CookieJar, jar)
