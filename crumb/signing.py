from __future__ import annotations

import hashlib
import hmac
import logging
import typing

from itsdangerous import BadSignature

from crumb.config import Config, Secrets, get_secret_key

__all__ = ["CookieSigner", "BadSignature"]

logger = logging.getLogger(__name__)


class CookieSigner:
    """
    Signs cookie values with a keyed SHA-1 digest.

    The signed form is `<hex digest>~<value>` where the digest is computed over
    the cookie name, the value and the secret key concatenated together. The
    name takes part in the digest so a value signed for one cookie cannot be
    replayed under another name.

    Signing authenticates the value but does not hide it from the client.
    """

    separator = "~"
    digest_method = staticmethod(hashlib.sha1)

    def __init__(self, secret_key: str) -> None:
        self.secret_key = secret_key

    @property
    def signature_length(self) -> int:
        """Length of the hex digest in characters."""
        return self.digest_method().digest_size * 2

    def get_signature(self, name: str, value: str | None) -> str:
        payload = name + (value or "") + self.secret_key
        return self.digest_method(payload.encode("utf-8")).hexdigest()

    def sign(self, name: str, value: str | None) -> str:
        """Return the signed representation of the value, as written to the client."""
        return self.get_signature(name, value) + self.separator + (value or "")

    def verify_signature(self, name: str, value: str, signature: str) -> bool:
        expected = self.get_signature(name, value)
        return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))

    def unsign(self, name: str, signed_value: str) -> str:
        """
        Verify signed value and return the original value.

        Raises itsdangerous.BadSignature if the value is malformed or was modified.
        """
        signature, separator, value = signed_value.partition(self.separator)
        if not separator:
            raise BadSignature(f'No "{self.separator}" found in value.', payload=signed_value)

        # the first separator must sit right after the digest
        if len(signature) != self.signature_length:
            raise BadSignature("Signature has unexpected length.", payload=signed_value)

        if not self.verify_signature(name, value, signature):
            raise BadSignature(f'Signature "{signature}" does not match.', payload=value)
        return value

    def safe_unsign(self, name: str, signed_value: str) -> tuple[bool, str | None]:
        """
        Safely unsign value.

        Will not raise itsdangerous.BadSignature. Returns two-tuple: operation
        status and unsigned value.
        """
        try:
            return True, self.unsign(name, signed_value)
        except BadSignature:
            logger.debug('Cookie "%s" failed signature verification.', name)
            return False, None

    @classmethod
    def from_config(
        cls,
        config: Config,
        key_name: str = "APP_KEY",
        secrets: Secrets | None = None,
    ) -> typing.Self:
        return cls(get_secret_key(config, key_name, secrets=secrets))
