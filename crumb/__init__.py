from crumb.config import Config, Secrets
from crumb.exceptions import CrumbError, ImproperlyConfigured, PayloadTooLarge
from crumb.jar import CookieJar
from crumb.middleware import CookieJarMiddleware
from crumb.signing import BadSignature, CookieSigner
from crumb.structures import CookieEntry
from crumb.transports import CookieTransport, MessageTransport, ResponseTransport

__all__ = [
    "BadSignature",
    "Config",
    "CookieEntry",
    "CookieJar",
    "CookieJarMiddleware",
    "CookieSigner",
    "CookieTransport",
    "CrumbError",
    "ImproperlyConfigured",
    "MessageTransport",
    "PayloadTooLarge",
    "ResponseTransport",
    "Secrets",
]

__version__ = "0.1.0"
