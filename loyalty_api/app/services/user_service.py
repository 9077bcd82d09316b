"""
Business logic for loyalty program customers.

Users hold a points balance.  Points are added with ``increment`` and
redeemed with ``decrement``; a redemption first checks the balance
while holding the store lock so that two concurrent redemptions cannot
both pass the check.
"""

import logging
from typing import List, Optional

from loyalty_api.app.core.query import utc_now_iso
from loyalty_api.app.core.store import Store
from loyalty_api.app.core.tables import Record, Table
from loyalty_api.app.schemas.user import UserCreate, UserUpdate


class InsufficientPointsError(ValueError):
    """Raised when a redemption exceeds the user's balance."""


class UserService:
    """Сервис для работы с клиентами программ лояльности.

    Хранит баллы пользователя и членство в программах.  Проверка
    уникальности e-mail и телефона выполняется при регистрации.
    """

    @classmethod
    async def list_users(cls, db: Store, loyalty_program_id: Optional[str] = None) -> List[Record]:
        """Return all users (newest first) or the members of one program."""
        if loyalty_program_id:
            from loyalty_api.app.services.loyalty_service import LoyaltyProgramService
            return await LoyaltyProgramService.get_members(db, loyalty_program_id)
        return await db(Table.USERS).select("*").order_by("created_at", "desc")

    @classmethod
    async def get_user(cls, db: Store, user_id: str) -> Optional[Record]:
        return await db(Table.USERS).where("id", user_id).first()

    @classmethod
    async def find_by_email_or_phone(
        cls, db: Store, email: Optional[str], phone: Optional[str]
    ) -> Optional[Record]:
        """Return the first user matching the e-mail or, failing that, the phone."""
        if email:
            user = await db(Table.USERS).where("email", email).first()
            if user is not None:
                return user
        if phone:
            return await db(Table.USERS).where("phone", phone).first()
        return None

    @classmethod
    async def create_user(cls, db: Store, data: UserCreate) -> Optional[Record]:
        """Register a user and optionally enrol them in a program.

        Returns ``None`` when a user with the same e-mail or phone
        already exists.
        """
        logger = logging.getLogger(__name__)
        fields = data.model_dump(mode="json", exclude={"loyalty_program_id"})
        async with db.lock:
            if await cls.find_by_email_or_phone(db, data.email, data.phone) is not None:
                logger.info("Rejected duplicate user %s / %s", data.email, data.phone)
                return None
            now = utc_now_iso()
            [user] = await db(Table.USERS).insert({**fields, "created_at": now, "updated_at": now}).returning("*")
        logger.info("Registered user %s", user["id"])
        if data.loyalty_program_id:
            await cls.add_to_loyalty_program(db, user["id"], data.loyalty_program_id)
        return user

    @classmethod
    async def update_user(cls, db: Store, user_id: str, data: UserUpdate) -> Optional[Record]:
        """Update a user's profile.  Returns ``None`` if the user does not exist."""
        logger = logging.getLogger(__name__)
        fields = data.model_dump(mode="json", exclude_unset=True, exclude={"loyalty_program_id"})
        rows = await db(Table.USERS).where("id", user_id).update(fields).returning("*")
        if not rows:
            return None
        logger.info("Updated user %s", user_id)
        return rows[0]

    @classmethod
    async def add_points(cls, db: Store, user_id: str, points: int) -> Optional[Record]:
        logger = logging.getLogger(__name__)
        rows = await db(Table.USERS).where("id", user_id).increment("points", points).returning("*")
        if not rows:
            return None
        logger.info("Added %s points to user %s", points, user_id)
        return rows[0]

    @classmethod
    async def redeem_points(cls, db: Store, user_id: str, points: int) -> Record:
        """Subtract ``points`` from the user's balance.

        Raises ``InsufficientPointsError`` if the user does not exist or
        holds fewer points than requested.
        """
        logger = logging.getLogger(__name__)
        async with db.lock:
            user = await cls.get_user(db, user_id)
            if user is None or (user.get("points") or 0) < points:
                raise InsufficientPointsError("Insufficient points")
            [updated] = await db(Table.USERS).where("id", user_id).decrement("points", points).returning("*")
        logger.info("Redeemed %s points from user %s", points, user_id)
        return updated

    @classmethod
    async def delete_user(cls, db: Store, user_id: str) -> bool:
        """Delete a user together with their memberships and pass assignments."""
        logger = logging.getLogger(__name__)
        removed = await db(Table.USERS).where("id", user_id).del_()
        if not removed:
            return False
        await db(Table.LOYALTY_PROGRAM_USERS).where("user_id", user_id).delete()
        await db(Table.USER_WALLET_PASSES).where("user_id", user_id).delete()
        logger.info("Deleted user %s", user_id)
        return True

    @classmethod
    async def add_to_loyalty_program(cls, db: Store, user_id: str, loyalty_program_id: str) -> Record:
        [membership] = await db(Table.LOYALTY_PROGRAM_USERS).insert({
            "user_id": user_id,
            "loyalty_program_id": loyalty_program_id,
            "joined_at": utc_now_iso(),
        }).returning("*")
        return membership
