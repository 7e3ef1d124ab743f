import dataclasses


@dataclasses.dataclass
class CookieEntry:
    """A pending cookie write. A value of None marks the cookie for deletion."""

    name: str
    value: str | None = None
    lifetime_minutes: int = 0
    path: str = "/"
    domain: str | None = None
    secure: bool = False

    @property
    def is_session(self) -> bool:
        return self.lifetime_minutes == 0

    def expires_at(self, now: float) -> int:
        """Return expiry as epoch seconds, 0 for session cookies."""
        if self.is_session:
            return 0
        return int(now) + self.lifetime_minutes * 60
