from dataclasses import dataclass

from app.errors import AuthenticationRequired, AuthorizationError


@dataclass(frozen=True)
class Identity:
    user_id: int | None = None
    role: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def is_admin(self) -> bool:
        return self.is_authenticated and self.role == "admin"


ANONYMOUS = Identity()


def resolve_identity(store, raw_user_id: str | None) -> Identity:
    """
    Map the id handed over by the authentication layer onto a user row.
    Missing, malformed or unknown ids resolve to ANONYMOUS.
    """
    if not raw_user_id:
        return ANONYMOUS
    try:
        user_id = int(raw_user_id)
    except ValueError:
        return ANONYMOUS
    user = store.get_user(user_id)
    if user is None:
        return ANONYMOUS
    return Identity(user_id=user.id, role=user.role)


def ensure_authenticated(identity: Identity) -> Identity:
    if not identity.is_authenticated:
        raise AuthenticationRequired("Authentication required")
    return identity


def ensure_admin(identity: Identity) -> Identity:
    if not identity.is_admin:
        raise AuthorizationError("Admin access required")
    return identity
