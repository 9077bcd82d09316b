"""
Service layer for companies.

Companies own loyalty programs and wallet passes.  Besides plain CRUD
this module assembles the company detail view (programs, passes and
counters) and the per-company statistics used by the dashboard.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from loyalty_api.app.core.query import utc_now_iso
from loyalty_api.app.core.store import Store
from loyalty_api.app.core.tables import Record, Table
from loyalty_api.app.schemas.company import CompanyCreate, CompanyUpdate


class CompanyService:
    """Сервис для работы с компаниями."""

    @classmethod
    async def list_companies(cls, db: Store) -> List[Record]:
        """Return all companies, newest first."""
        return await db(Table.COMPANIES).select("*").order_by("created_at", "desc")

    @classmethod
    async def get_company(cls, db: Store, company_id: str) -> Optional[Record]:
        return await db(Table.COMPANIES).where("id", company_id).first()

    @classmethod
    async def get_company_with_programs(cls, db: Store, company_id: str) -> Optional[Dict[str, Any]]:
        """Return the company together with its programs, passes and counters.

        Returns ``None`` if the company does not exist.
        """
        company = await cls.get_company(db, company_id)
        if company is None:
            return None
        programs = await db(Table.LOYALTY_PROGRAMS).where("company_id", company_id).select("*")
        passes = await db(Table.WALLET_PASSES).where("company_id", company_id).select("*")
        return {
            **company,
            "loyaltyPrograms": programs,
            "walletPasses": passes,
            "stats": {
                "totalLoyaltyPrograms": len(programs),
                "totalWalletPasses": len(passes),
            },
        }

    @classmethod
    async def create_company(cls, db: Store, data: CompanyCreate) -> Record:
        logger = logging.getLogger(__name__)
        now = utc_now_iso()
        result = db(Table.COMPANIES).insert({
            "name": data.name,
            "admin_email": data.admin_email,
            "logo": data.logo,
            "created_at": now,
            "updated_at": now,
        })
        [company] = await result.returning("*")
        logger.info("Created company %s (%s)", company["id"], company["name"])
        return company

    @classmethod
    async def update_company(cls, db: Store, company_id: str, data: CompanyUpdate) -> Optional[Record]:
        """Replace the editable fields of a company.

        Returns the updated company or ``None`` if it does not exist.
        """
        logger = logging.getLogger(__name__)
        result = db(Table.COMPANIES).where("id", company_id).update({
            "name": data.name,
            "admin_email": data.admin_email,
            "logo": data.logo,
        })
        rows = await result.returning("*")
        if not rows:
            return None
        logger.info("Updated company %s", company_id)
        return rows[0]

    @classmethod
    async def delete_company(cls, db: Store, company_id: str) -> bool:
        """Delete a company.  Returns ``True`` if a record was removed.

        Programs and passes referencing the company are left in place;
        their joins simply stop resolving a company name.
        """
        logger = logging.getLogger(__name__)
        removed = await db(Table.COMPANIES).where("id", company_id).del_()
        if removed:
            logger.info("Deleted company %s", company_id)
        return removed > 0

    @classmethod
    async def get_stats(cls, db: Store, company_id: str) -> Optional[Dict[str, int]]:
        """Count the company's programs, passes and distinct program members."""
        if await cls.get_company(db, company_id) is None:
            return None
        programs = await db(Table.LOYALTY_PROGRAMS).where("company_id", company_id).count()
        passes = await db(Table.WALLET_PASSES).where("company_id", company_id).count()
        members = await (
            db(Table.LOYALTY_PROGRAM_USERS)
            .join(Table.LOYALTY_PROGRAMS, "loyalty_program_users.loyalty_program_id", "loyalty_programs.id")
            .where("loyalty_programs.company_id", company_id)
            .then(lambda rows: {row["user_id"] for row in rows})
        )
        return {"loyaltyPrograms": programs, "walletPasses": passes, "users": len(members)}
