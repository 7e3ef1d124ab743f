from starlette.requests import HTTPConnection
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from crumb.jar import CookieJar
from crumb.signing import CookieSigner
from crumb.transports import MessageTransport, decode_cookies


class CookieJarMiddleware:
    """
    Attach a CookieJar to every HTTP request and flush it into the response.

    The jar is available as `request.state.cookie_jar` (or via `CookieJar.of`).
    Queued cookies are written as `set-cookie` headers when the response starts.
    Cookie values are percent-encoded on the wire and decoded on the way in.
    """

    def __init__(self, app: ASGIApp, secret_key: str) -> None:
        self.app = app
        self.signer = CookieSigner(secret_key)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":  # pragma: no cover
            return await self.app(scope, receive, send)

        connection = HTTPConnection(scope, receive)
        jar = CookieJar(self.signer, decode_cookies(connection.cookies))
        scope.setdefault("state", {})
        scope["state"]["cookie_jar"] = jar

        async def sender(message: Message) -> None:
            if message["type"] == "http.response.start":
                transport = MessageTransport(message)
                jar.send(transport)
                await send(message)
                transport.close()
                return
            await send(message)

        await self.app(scope, receive, sender)
