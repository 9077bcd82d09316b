"""
Service layer for loyalty programs.

Programs belong to a company and collect members through the
``loyalty_program_users`` junction table.  Listings carry the owning
company's name via the ``companies`` join.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from loyalty_api.app.core.query import utc_now_iso
from loyalty_api.app.core.store import Store
from loyalty_api.app.core.tables import Record, Table
from loyalty_api.app.schemas.loyalty import LoyaltyProgramCreate, LoyaltyProgramUpdate


class LoyaltyProgramService:
    """Service class for managing loyalty programs."""

    @classmethod
    async def list_programs(cls, db: Store, company_id: Optional[str] = None) -> List[Record]:
        """Return programs, newest first, optionally only those of one company."""
        query = (
            db(Table.LOYALTY_PROGRAMS)
            .join(Table.COMPANIES, "loyalty_programs.company_id", "companies.id")
            .select("loyalty_programs.*", "companies.name as company_name")
            .order_by("loyalty_programs.created_at", "desc")
        )
        if company_id:
            query = query.where("company_id", company_id)
        return await query

    @classmethod
    async def get_program(cls, db: Store, program_id: str) -> Optional[Record]:
        return await (
            db(Table.LOYALTY_PROGRAMS)
            .join(Table.COMPANIES, "loyalty_programs.company_id", "companies.id")
            .where("loyalty_programs.id", program_id)
            .select("loyalty_programs.*", "companies.name as company_name")
            .first()
        )

    @classmethod
    async def get_users_count(cls, db: Store, program_id: str) -> int:
        return await db(Table.LOYALTY_PROGRAM_USERS).where("loyalty_program_id", program_id).count()

    @classmethod
    async def get_members(cls, db: Store, program_id: str) -> List[Record]:
        """Return the program's users, most recently joined first.

        Each user record carries the ``joined_at`` timestamp of its
        membership.  Memberships pointing at deleted users are skipped.
        """
        memberships = await (
            db(Table.LOYALTY_PROGRAM_USERS)
            .where("loyalty_program_id", program_id)
            .order_by("joined_at", "desc")
        )
        users = {user["id"]: user for user in await db(Table.USERS)}
        return [
            {**users[m["user_id"]], "joined_at": m.get("joined_at")}
            for m in memberships
            if m.get("user_id") in users
        ]

    @classmethod
    async def get_with_details(cls, db: Store, program_id: str) -> Optional[Dict[str, Any]]:
        """Return the program with its members, passes and point totals."""
        program = await cls.get_program(db, program_id)
        if program is None:
            return None
        users = await cls.get_members(db, program_id)
        passes = await (
            db(Table.WALLET_PASSES)
            .where("loyalty_program_id", program_id)
            .order_by("created_at", "desc")
        )
        total_points = sum(user.get("points") or 0 for user in users)
        return {
            **program,
            "users": users,
            "walletPasses": passes,
            "stats": {
                "totalUsers": len(users),
                "totalWalletPasses": len(passes),
                "totalPoints": total_points,
                "averagePoints": round(total_points / len(users)) if users else 0,
            },
        }

    @classmethod
    async def create_program(cls, db: Store, data: LoyaltyProgramCreate) -> Record:
        logger = logging.getLogger(__name__)
        now = utc_now_iso()
        [program] = await db(Table.LOYALTY_PROGRAMS).insert({
            "company_id": data.company_id,
            "name": data.name,
            "template": data.template,
            "invite_link": data.invite_link,
            "created_at": now,
            "updated_at": now,
        }).returning("*")
        logger.info("Created loyalty program %s for company %s", program["id"], data.company_id)
        return program

    @classmethod
    async def update_program(cls, db: Store, program_id: str, data: LoyaltyProgramUpdate) -> Optional[Record]:
        """Update name, template and invite link.  ``None`` if not found."""
        logger = logging.getLogger(__name__)
        rows = await db(Table.LOYALTY_PROGRAMS).where("id", program_id).update({
            "name": data.name,
            "template": data.template,
            "invite_link": data.invite_link,
        }).returning("*")
        if not rows:
            return None
        logger.info("Updated loyalty program %s", program_id)
        return rows[0]

    @classmethod
    async def delete_program(cls, db: Store, program_id: str) -> bool:
        """Delete a program and its memberships."""
        logger = logging.getLogger(__name__)
        removed = await db(Table.LOYALTY_PROGRAMS).where("id", program_id).del_()
        if not removed:
            return False
        await db(Table.LOYALTY_PROGRAM_USERS).where("loyalty_program_id", program_id).delete()
        logger.info("Deleted loyalty program %s", program_id)
        return True
