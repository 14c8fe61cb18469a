"""User Service - Business Logic Layer"""

import re
from typing import Optional, List, Tuple
from uuid import UUID
from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError
from app.core.logging import get_logger
from app.core.security import get_password_hash, verify_password
from app.domain.numbering import generate_customer_id
from app.models.enums import UserRole
from app.models.user import User
from app.schemas.auth import RegisterRequest
from app.schemas.user import UserUpdate
from app.services.persistence import add_unique, add_with_generated_number, is_unique_violation
from app.utils.time import get_utc_now

logger = get_logger(__name__)


class UserService:
    """Service layer for user-related operations"""

    @staticmethod
    async def create_user(
        db: AsyncSession,
        username: str,
        email: str,
        password: str,
        full_name: str,
        phone: str,
        role: UserRole = UserRole.CUSTOMER,
        address: Optional[dict] = None,
        is_active: bool = True,
    ) -> User:
        """
        Create a user. Customers get a generated customer_id.

        Raises:
            ConflictError: username, email or customer_id already taken
        """
        draft = {
            "username": username,
            "email": email.lower(),
            "hashed_password": get_password_hash(password),
            "full_name": full_name,
            "phone": phone,
            "address": address or {},
            "role": role,
            "is_active": is_active,
        }

        if role == UserRole.CUSTOMER:
            draft["customer_id"] = generate_customer_id(get_utc_now())
            # username/email clashes are not retried; only the generated id is
            await UserService._ensure_available(db, username=username, email=draft["email"])
            user = await add_with_generated_number(
                db,
                User,
                draft,
                field="customer_id",
                regenerate=lambda: generate_customer_id(get_utc_now()),
            )
        else:
            user = await add_unique(db, User(**draft), fields=("username", "email"), entity="User")

        await db.refresh(user)
        logger.info("User created", extra={"user_id": str(user.id), "role": user.role.value})
        return user

    @staticmethod
    async def _ensure_available(db: AsyncSession, username: str, email: str) -> None:
        if await UserService.get_user_by_username(db, username):
            raise ConflictError("User with this username already exists", field="username")
        if await UserService.get_user_by_email(db, email):
            raise ConflictError("User with this email already exists", field="email")

    @staticmethod
    async def register_customer(db: AsyncSession, data: RegisterRequest) -> User:
        return await UserService.create_user(
            db,
            username=data.username,
            email=data.email,
            password=data.password,
            full_name=data.full_name,
            phone=data.phone,
            address=data.address.model_dump() if data.address else None,
        )

    @staticmethod
    async def get_user_by_id(db: AsyncSession, user_id: UUID) -> Optional[User]:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_user_by_username(db: AsyncSession, username: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_user_by_customer_id(db: AsyncSession, customer_id: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.customer_id == customer_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def find_customer(db: AsyncSession, identifier: str) -> Optional[User]:
        """
        Find a customer by phone number or customer_id.

        The phone is tried first when the identifier holds at least 9 digits.
        """
        raw = identifier.strip()
        digits = re.sub(r"\D", "", raw)
        user = None
        if len(digits) >= 9:
            result = await db.execute(select(User).where(User.phone == digits).limit(1))
            user = result.scalar_one_or_none()
        if not user:
            user = await UserService.get_user_by_customer_id(db, raw)
        return user

    @staticmethod
    async def authenticate_user(
        db: AsyncSession,
        password: str,
        email: Optional[str] = None,
        username: Optional[str] = None,
    ) -> Optional[User]:
        """Return the user when the credentials match, stamping last_login."""
        if email:
            user = await UserService.get_user_by_email(db, email)
        else:
            user = await UserService.get_user_by_username(db, username or "")
        if not user or not verify_password(password, user.hashed_password):
            return None
        user.last_login = get_utc_now()
        await db.flush()
        return user

    @staticmethod
    async def get_users(
        db: AsyncSession,
        skip: int = 0,
        limit: int = 100,
        role: Optional[UserRole] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[User], int]:
        """
        Get paginated list of users.

        Returns:
            Tuple of (users list, total count)
        """
        conditions = []
        if role:
            conditions.append(User.role == role)
        if search:
            pattern = f"%{search}%"
            conditions.append(or_(
                User.full_name.ilike(pattern),
                User.email.ilike(pattern),
                User.username.ilike(pattern),
                User.phone.ilike(pattern),
                User.customer_id.ilike(pattern),
            ))

        total = await db.scalar(select(func.count(User.id)).where(*conditions))
        result = await db.execute(
            select(User)
            .where(*conditions)
            .order_by(User.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    @staticmethod
    async def update_user(
        db: AsyncSession,
        user: User,
        user_update: UserUpdate,
        allow_admin_fields: bool = False,
    ) -> User:
        """Apply a profile update; role/is_active only when allow_admin_fields is set."""
        data = user_update.model_dump(exclude_unset=True)
        if not allow_admin_fields:
            data.pop("role", None)
            data.pop("is_active", None)
        if "email" in data and data["email"]:
            data["email"] = data["email"].lower()

        for field, value in data.items():
            if value is None and field not in ("address", "avatar"):
                continue
            setattr(user, field, value)

        if data.get("role") == UserRole.CUSTOMER and not user.customer_id:
            user.customer_id = generate_customer_id(get_utc_now())

        try:
            async with db.begin_nested():
                await db.flush()
        except IntegrityError as exc:
            for field in ("email", "username", "customer_id"):
                if is_unique_violation(exc, field):
                    raise ConflictError(f"User with this {field} already exists", field=field) from exc
            raise
        await db.refresh(user)
        return user

    @staticmethod
    async def deactivate_user(db: AsyncSession, user_id: UUID) -> bool:
        """Deactivate instead of deleting; bills and reports keep their references."""
        user = await UserService.get_user_by_id(db, user_id)
        if not user:
            return False
        user.is_active = False
        await db.flush()
        logger.info("User deactivated", extra={"user_id": str(user_id)})
        return True

    @staticmethod
    async def change_password(
        db: AsyncSession,
        user: User,
        current_password: str,
        new_password: str,
    ) -> Optional[User]:
        if not verify_password(current_password, user.hashed_password):
            return None
        user.hashed_password = get_password_hash(new_password)
        await db.flush()
        return user
