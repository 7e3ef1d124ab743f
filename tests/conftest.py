import dataclasses
import pytest
import typing

from crumb.jar import CookieJar
from crumb.signing import CookieSigner


@dataclasses.dataclass
class SentCookie:
    name: str
    value: str
    expires: int
    path: str
    domain: str | None
    secure: bool


class RecordingTransport:
    def __init__(self, headers_sent: bool = False) -> None:
        self.headers_sent = headers_sent
        self.cookies: list[SentCookie] = []

    def set_cookie(
        self,
        name: str,
        value: str,
        expires: int,
        path: str,
        domain: str | None,
        secure: bool,
    ) -> None:
        self.cookies.append(SentCookie(name, value, expires, path, domain, secure))


class JarFactory(typing.Protocol):  # pragma: nocover
    def __call__(self, incoming: typing.Mapping[str, str] | None = None) -> CookieJar:
        ...


NOW = 1_700_000_000.0


@pytest.fixture()
def secret_key() -> str:
    return "s3cr3t"


@pytest.fixture()
def signer(secret_key: str) -> CookieSigner:
    return CookieSigner(secret_key)


@pytest.fixture()
def jar_factory(signer: CookieSigner) -> JarFactory:
    def factory(incoming: typing.Mapping[str, str] | None = None) -> CookieJar:
        return CookieJar(signer, incoming, clock=lambda: NOW)

    return factory


@pytest.fixture()
def jar(jar_factory: JarFactory) -> CookieJar:
    return jar_factory()


@pytest.fixture()
def transport() -> RecordingTransport:
    return RecordingTransport()
