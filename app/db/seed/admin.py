# app/db/seed/admin.py

from sqlalchemy.future import select

from app.core.config import settings
from app.core.logging_config import get_logger
from app.core.security import get_password_hash
from app.db.deps import AsyncSessionLocal
from app.models.user import User
from app.schemas.users import normalize_email
from app.utils.enums import Role

logger = get_logger("seed")


async def seed_default_admin(session_factory=AsyncSessionLocal) -> bool:
    """Create the configured admin account once. Returns True when a user was added."""
    email = normalize_email(settings.DEFAULT_ADMIN_EMAIL)
    password = settings.DEFAULT_ADMIN_PASSWORD
    if not email or not password:
        logger.info("DEFAULT_ADMIN_EMAIL/PASSWORD not set; skipping admin seed")
        return False

    async with session_factory() as db:
        result = await db.execute(select(User).where(User.email == email))
        if result.scalars().first():
            logger.info(f"Admin {email} already exists. Skipping seed.")
            return False

        db.add(
            User(
                name=settings.DEFAULT_ADMIN_NAME,
                email=email,
                password_hash=get_password_hash(password),
                role=Role.admin,
            )
        )
        await db.commit()
        logger.info(f"Seeded default admin {email}")
        return True
