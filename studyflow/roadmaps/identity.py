## Current-user signals from the identity provider
import uuid
from dataclasses import dataclass, field


class NotAuthenticated(Exception):
    pass


@dataclass(frozen=True)
class Identity:
    """Opaque view of the auth provider. We never authenticate anyone ourselves.

    ``guest_id`` scopes the local store for signed-out users and survives
    sign-in so guest data can be migrated to the account.
    """

    user_id: str | None = None
    is_authenticated: bool = False
    is_loaded: bool = True
    guest_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def is_guest(self) -> bool:
        return not self.is_authenticated and self.is_loaded

    @property
    def guest_key(self) -> str:
        return f"guest_{self.guest_id}"

    def require_user_id(self) -> str:
        if not self.is_authenticated or not self.user_id:
            raise NotAuthenticated()
        return self.user_id
