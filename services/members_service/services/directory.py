"""Member lookups used by the other services, plus account maintenance.

Lifecycle operations validate coaches and resolve display names through these
functions instead of querying the ``users`` table themselves.
"""

from decimal import Decimal
from typing import Iterable, Optional

from libs.auth.models import UserRole
from libs.common.errors import NotFoundError, ValidationError
from libs.common.logging import get_logger
from services.media_service.services import asset_ops
from services.media_service.storage import AssetStore
from services.members_service.models import User
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

UNKNOWN_NAME = "Unknown"
AVATAR_CATEGORY = "avatar"


async def get_user(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def find_coach(db: AsyncSession, coach_id: int) -> Optional[User]:
    """Return the active coach with ``coach_id``, or None."""
    result = await db.execute(
        select(User).where(
            User.id == coach_id,
            User.role == UserRole.COACH,
            User.is_active.is_(True),
        )
    )
    return result.scalar_one_or_none()


async def require_coach_account(db: AsyncSession, coach_id: int) -> User:
    """Return the coach or raise ``ValidationError("Coach not found")``."""
    coach = await find_coach(db, coach_id)
    if coach is None:
        raise ValidationError("Coach not found")
    return coach


async def list_coaches(db: AsyncSession) -> list[User]:
    result = await db.execute(
        select(User)
        .where(User.role == UserRole.COACH, User.is_active.is_(True))
        .order_by(User.last_name.asc(), User.first_name.asc())
    )
    return list(result.scalars().all())


async def display_names(
    db: AsyncSession, user_ids: Iterable[Optional[int]]
) -> dict[int, str]:
    """Resolve full names for many users in one query."""
    ids = {user_id for user_id in user_ids if user_id is not None}
    if not ids:
        return {}
    result = await db.execute(select(User).where(User.id.in_(ids)))
    return {user.id: user.full_name for user in result.scalars()}


async def list_users(db: AsyncSession) -> list[User]:
    """Every account, newest first."""
    result = await db.execute(
        select(User).order_by(User.created_at.desc(), User.id.desc())
    )
    return list(result.scalars().all())


async def create_user(
    db: AsyncSession,
    *,
    email: str,
    first_name: str,
    last_name: str,
    role: UserRole,
    hourly_rate: Optional[Decimal] = None,
    bio: Optional[str] = None,
) -> User:
    existing = await db.execute(
        select(User.id).where(func.lower(User.email) == email.lower())
    )
    if existing.scalar_one_or_none() is not None:
        raise ValidationError("A user with this email already exists")

    user = User(
        email=email.lower(),
        first_name=first_name,
        last_name=last_name,
        role=role,
        hourly_rate=hourly_rate if role == UserRole.COACH else None,
        bio=bio,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("Created %s account %s", role.value, user.id)
    return user


async def update_user(
    db: AsyncSession,
    user_id: int,
    *,
    role: Optional[UserRole] = None,
    is_active: Optional[bool] = None,
    hourly_rate: Optional[Decimal] = None,
) -> User:
    user = await get_user(db, user_id)
    if role is not None:
        user.role = role
    if is_active is not None:
        user.is_active = is_active
    if hourly_rate is not None:
        user.hourly_rate = hourly_rate
    await db.commit()
    await db.refresh(user)
    logger.info("Updated account %s (role=%s active=%s)", user.id, user.role.value, user.is_active)
    return user


# ---------------------------------------------------------------------------
# Self-service profile
# ---------------------------------------------------------------------------


async def update_profile(
    db: AsyncSession,
    user_id: int,
    *,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    bio: Optional[str] = None,
) -> User:
    """Change the caller's own name or bio. Blank names are ignored."""
    user = await get_user(db, user_id)
    if first_name and first_name.strip():
        user.first_name = first_name.strip()
    if last_name and last_name.strip():
        user.last_name = last_name.strip()
    if bio is not None:
        user.bio = bio
    await db.commit()
    await db.refresh(user)
    logger.info("Profile %s updated", user.id)
    return user


async def set_avatar(
    db: AsyncSession,
    store: AssetStore,
    user_id: int,
    *,
    filename: str,
    data: bytes,
    content_type: Optional[str] = None,
) -> User:
    """Upload a new avatar, point the profile at it, then drop the old one."""
    user = await get_user(db, user_id)
    asset = await asset_ops.upload_asset(
        db,
        store,
        category=AVATAR_CATEGORY,
        filename=filename,
        data=data,
        content_type=content_type,
        uploaded_by=user_id,
        object_type="user",
        object_id=user_id,
    )
    previous_url = user.profile_image_url
    user.profile_image_url = asset.url
    await db.commit()
    await db.refresh(user)

    if previous_url:
        await asset_ops.delete_asset(db, store, previous_url)
    logger.info("Avatar for user %s set to asset %s", user.id, asset.id)
    return user


async def clear_avatar(db: AsyncSession, store: AssetStore, user_id: int) -> User:
    user = await get_user(db, user_id)
    previous_url = user.profile_image_url
    if previous_url is None:
        return user

    user.profile_image_url = None
    await db.commit()
    await db.refresh(user)
    await asset_ops.delete_asset(db, store, previous_url)
    logger.info("Avatar removed for user %s", user.id)
    return user
