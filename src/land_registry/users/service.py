"""User accounts — registration, login, wallet address, admin management."""

import logging

from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession

from land_registry.common.exceptions import (
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from land_registry.storage import RegistryStore
from land_registry.users.models import UserModel, UserRole

logger = logging.getLogger(__name__)

# Roles a visitor may pick when signing up; verifiers are created by admins.
SELF_SERVICE_ROLES = frozenset({UserRole.LANDOWNER, UserRole.BUYER})

SEED_ACCOUNTS = (
    {
        "username": "admin",
        "email": "admin@landregistry.com",
        "full_name": "System Administrator",
        "role": UserRole.ADMIN,
    },
    {
        "username": "verifier",
        "email": "verifier@landregistry.com",
        "full_name": "Land Verifier",
        "role": UserRole.VERIFIER,
    },
)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class UserService:
    """User management operations."""

    async def create_user(
        self,
        session: AsyncSession,
        username: str,
        email: str,
        password: str,
        full_name: str,
        role: UserRole,
        wallet_address: str | None = None,
    ) -> UserModel:
        """Create a user with any role. Usernames and emails are unique, case-insensitively."""
        store = RegistryStore(session)
        if await store.get_user_by_username(username):
            raise ValidationError("Username already exists")
        if await store.get_user_by_email(email):
            raise ValidationError("Email already registered")

        user = await store.add_user(UserModel(
            username=username,
            email=email,
            password_hash=pwd_context.hash(password),
            full_name=full_name,
            role=role,
            wallet_address=wallet_address,
        ))
        logger.info("user created", extra={"user_id": user.id, "role": role.value})
        return user

    async def register(
        self,
        session: AsyncSession,
        username: str,
        email: str,
        password: str,
        full_name: str,
        role: UserRole = UserRole.LANDOWNER,
        wallet_address: str | None = None,
    ) -> UserModel:
        """Self-service sign-up, limited to landowner and buyer accounts."""
        if role not in SELF_SERVICE_ROLES:
            raise ForbiddenError(f"Cannot self-register as {role.value}")
        return await self.create_user(
            session, username, email, password, full_name, role, wallet_address
        )

    async def create_verifier(
        self,
        session: AsyncSession,
        username: str,
        email: str,
        password: str,
        full_name: str,
    ) -> UserModel:
        return await self.create_user(
            session, username, email, password, full_name, UserRole.VERIFIER
        )

    async def authenticate(
        self, session: AsyncSession, username: str, password: str
    ) -> UserModel:
        user = await RegistryStore(session).get_user_by_username(username)
        if user is None or not pwd_context.verify(password, user.password_hash):
            raise UnauthorizedError("Invalid username or password")
        return user

    async def get_user(self, session: AsyncSession, user_id: int) -> UserModel:
        user = await RegistryStore(session).get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def list_users(
        self, session: AsyncSession, role: UserRole | None = None
    ) -> list[UserModel]:
        return await RegistryStore(session).list_users(role)

    async def update_wallet(
        self, session: AsyncSession, user_id: int, wallet_address: str
    ) -> UserModel:
        user = await self.get_user(session, user_id)
        user.wallet_address = wallet_address
        await session.flush()
        return user

    async def seed_defaults(
        self,
        session: AsyncSession,
        admin_password: str,
        verifier_password: str,
    ) -> list[UserModel]:
        """Create the initial admin and verifier accounts if absent. Returns those created."""
        passwords = {UserRole.ADMIN: admin_password, UserRole.VERIFIER: verifier_password}
        store = RegistryStore(session)
        created = []
        for account in SEED_ACCOUNTS:
            if await store.get_user_by_username(account["username"]):
                continue
            created.append(await self.create_user(
                session,
                password=passwords[account["role"]],
                **account,
            ))
        return created
