"""Session tokens and role-based admission control.

Every mutating endpoint declares the ``Operation`` it performs; the gate
admits the caller only if their role appears in ``CAPABILITIES`` for it.
Ownership of a specific land is not checked here, because it needs the
entity loaded first; the lifecycle engines do that.
"""

import enum

from fastapi import Depends, Request
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from land_registry.common.exceptions import ForbiddenError, UnauthorizedError
from land_registry.users.models import UserModel, UserRole

SESSION_SALT = "registry-session"


class Operation(str, enum.Enum):
    REGISTER_LAND = "register_land"
    DECIDE_VERIFICATION = "decide_verification"
    SET_FOR_SALE = "set_for_sale"
    INITIATE_PURCHASE = "initiate_purchase"
    DECIDE_TRANSFER = "decide_transfer"
    LIST_LANDS_BY_STATUS = "list_lands_by_status"
    LIST_PENDING_TRANSACTIONS = "list_pending_transactions"
    VIEW_VERIFIER_LOG = "view_verifier_log"
    MANAGE_USERS = "manage_users"


CAPABILITIES: dict[Operation, frozenset[UserRole]] = {
    Operation.REGISTER_LAND: frozenset({UserRole.LANDOWNER}),
    Operation.DECIDE_VERIFICATION: frozenset({UserRole.VERIFIER}),
    Operation.SET_FOR_SALE: frozenset({UserRole.LANDOWNER}),
    Operation.INITIATE_PURCHASE: frozenset({UserRole.BUYER}),
    Operation.DECIDE_TRANSFER: frozenset({UserRole.VERIFIER}),
    Operation.LIST_LANDS_BY_STATUS: frozenset({UserRole.VERIFIER, UserRole.ADMIN}),
    Operation.LIST_PENDING_TRANSACTIONS: frozenset({UserRole.VERIFIER, UserRole.ADMIN}),
    Operation.VIEW_VERIFIER_LOG: frozenset({UserRole.VERIFIER}),
    Operation.MANAGE_USERS: frozenset({UserRole.ADMIN}),
}


def is_allowed(role: UserRole, operation: Operation) -> bool:
    return role in CAPABILITIES[operation]


def authorize(user: UserModel | None, operation: Operation) -> UserModel:
    """Admit ``user`` to ``operation`` or raise."""
    if user is None:
        raise UnauthorizedError()
    if not is_allowed(user.role, operation):
        raise ForbiddenError()
    return user


# ── Session tokens ──


def _get_serializer() -> URLSafeTimedSerializer:
    from land_registry.common.config import get_settings
    return URLSafeTimedSerializer(get_settings().secret_key, salt=SESSION_SALT)


def create_session_token(user_id: int) -> str:
    """Sign a session payload for ``user_id``."""
    return _get_serializer().dumps({"uid": user_id})


def verify_session_token(token: str) -> int | None:
    """Return the user id of a valid, unexpired token, else None."""
    from land_registry.common.config import get_settings

    try:
        payload = _get_serializer().loads(token, max_age=get_settings().session_max_age)
    except (BadSignature, SignatureExpired):
        return None
    user_id = payload.get("uid") if isinstance(payload, dict) else None
    return user_id if isinstance(user_id, int) else None


def _token_from_request(request: Request) -> str | None:
    from land_registry.common.config import get_settings

    auth = request.headers.get("Authorization", "")
    scheme, _, credentials = auth.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return request.cookies.get(get_settings().session_cookie)


# ── FastAPI dependencies ──


async def get_current_user(request: Request) -> UserModel:
    """Resolve the caller from their session token, or raise 401."""
    token = _token_from_request(request)
    if not token:
        raise UnauthorizedError()
    user_id = verify_session_token(token)
    if user_id is None:
        raise UnauthorizedError()

    from land_registry.deps import get_db
    from land_registry.storage import RegistryStore

    async with get_db().get_session() as session:
        user = await RegistryStore(session).get_user(user_id)
    if user is None:
        raise UnauthorizedError()
    return user


def require(operation: Operation):
    """Dependency factory: the current user, admitted to ``operation``."""

    async def _gate(user: UserModel = Depends(get_current_user)) -> UserModel:
        return authorize(user, operation)

    return _gate
