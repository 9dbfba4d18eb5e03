"""Account API router — sign-up, login, profile, admin user management."""

from fastapi import APIRouter, Depends, Query, Response

from land_registry.common.config import get_settings
from land_registry.common.schemas import MessageResponse
from land_registry.common.security import (
    Operation,
    create_session_token,
    get_current_user,
    require,
)
from land_registry.users.models import UserModel, UserRole
from land_registry.users.schemas import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserResponse,
    VerifierCreate,
    WalletUpdate,
)

router = APIRouter()


def _get_service():
    from land_registry.deps import get_user_service
    return get_user_service()


def _get_db():
    from land_registry.deps import get_db
    return get_db()


def _start_session(response: Response, user: UserModel) -> AuthResponse:
    settings = get_settings()
    token = create_session_token(user.id)
    response.set_cookie(
        settings.session_cookie,
        token,
        max_age=settings.session_max_age,
        httponly=True,
        samesite="lax",
    )
    return AuthResponse(**UserResponse.model_validate(user).model_dump(), token=token)


# ── Session ──

@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(body: RegisterRequest, response: Response):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        user = await svc.register(
            session,
            username=body.username,
            email=body.email,
            password=body.password,
            full_name=body.full_name,
            role=body.role,
            wallet_address=body.wallet_address,
        )
    return _start_session(response, user)


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, response: Response):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        user = await svc.authenticate(session, body.username, body.password)
    return _start_session(response, user)


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response):
    response.delete_cookie(get_settings().session_cookie)
    return MessageResponse(message="Logged out")


# ── Current user ──

@router.get("/user", response_model=UserResponse)
async def current_user(user: UserModel = Depends(get_current_user)):
    return UserResponse.model_validate(user)


@router.post("/user/wallet", response_model=UserResponse)
async def update_wallet(
    body: WalletUpdate, user: UserModel = Depends(get_current_user),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        updated = await svc.update_wallet(session, user.id, body.wallet_address)
        return UserResponse.model_validate(updated)


# ── Admin ──

@router.get("/users", response_model=list[UserResponse])
async def list_users(
    role: UserRole | None = Query(None),
    _=Depends(require(Operation.MANAGE_USERS)),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        users = await svc.list_users(session, role=role)
        return [UserResponse.model_validate(u) for u in users]


@router.post("/users/verifier", response_model=UserResponse, status_code=201)
async def create_verifier(
    body: VerifierCreate, _=Depends(require(Operation.MANAGE_USERS)),
):
    svc = _get_service()
    db = _get_db()
    async with db.get_session() as session:
        user = await svc.create_verifier(
            session,
            username=body.username,
            email=body.email,
            password=body.password,
            full_name=body.full_name,
        )
        return UserResponse.model_validate(user)
