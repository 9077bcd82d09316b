"""
Aggregated statistics over companies, programs, users and passes.

All figures are computed from the current store contents on every
call; nothing is cached.
"""

from typing import Any, Dict, List, Optional

from loyalty_api.app.core.store import Store
from loyalty_api.app.core.tables import Record, Table
from loyalty_api.app.services.company_service import CompanyService
from loyalty_api.app.services.loyalty_service import LoyaltyProgramService

HIGH_VALUE_POINTS = 1000
MEDIUM_VALUE_POINTS = 500


def _points(users: List[Record]) -> int:
    return sum(user.get("points") or 0 for user in users)


def _average(total: int, count: int) -> int:
    return round(total / count) if count else 0


class AnalyticsService:
    """Service class for dashboard and per-entity analytics."""

    @classmethod
    async def dashboard(cls, db: Store) -> Dict[str, Any]:
        users = await db(Table.USERS)
        holders = await db(Table.USER_WALLET_PASSES).then(lambda rows: {row["user_id"] for row in rows})
        total_points = _points(users)
        return {
            "overview": {
                "totalCompanies": await db(Table.COMPANIES).count(),
                "totalLoyaltyPrograms": await db(Table.LOYALTY_PROGRAMS).count(),
                "totalUsers": len(users),
                "totalPasses": await db(Table.WALLET_PASSES).count(),
                "usersWithPasses": len(holders),
            },
            "points": {
                "total": total_points,
                "average": _average(total_points, len(users)),
            },
        }

    @classmethod
    async def company_analytics(cls, db: Store, company_id: str) -> Optional[Dict[str, Any]]:
        """Per-program member and point totals for one company.

        Returns ``None`` if the company does not exist.
        """
        company = await CompanyService.get_company(db, company_id)
        if company is None:
            return None
        programs = await LoyaltyProgramService.list_programs(db, company_id=company_id)
        metrics = []
        for program in programs:
            members = await LoyaltyProgramService.get_members(db, program["id"])
            total = _points(members)
            metrics.append({
                "programId": program["id"],
                "programName": program.get("name"),
                "usersCount": len(members),
                "totalPoints": total,
                "averagePoints": _average(total, len(members)),
            })
        total_users = sum(m["usersCount"] for m in metrics)
        top = max(metrics, key=lambda m: m["usersCount"], default=None)
        return {
            "company": company,
            "overview": {
                "totalPrograms": len(programs),
                "totalUsers": total_users,
                "averageUsersPerProgram": _average(total_users, len(programs)),
            },
            "programs": metrics,
            "performance": {
                "topPerformingProgram": top,
                "totalPointsIssued": sum(m["totalPoints"] for m in metrics),
            },
        }

    @classmethod
    async def program_analytics(cls, db: Store, program_id: str) -> Optional[Dict[str, Any]]:
        """Member totals and value segmentation for one program."""
        program = await LoyaltyProgramService.get_program(db, program_id)
        if program is None:
            return None
        users = await LoyaltyProgramService.get_members(db, program_id)
        total = _points(users)
        balances = [user.get("points") or 0 for user in users]
        return {
            "program": program,
            "overview": {
                "totalUsers": len(users),
                "totalPoints": total,
                "averagePoints": _average(total, len(users)),
                "topUser": max(users, key=lambda u: u.get("points") or 0, default=None),
            },
            "userSegmentation": {
                "highValue": sum(1 for p in balances if p >= HIGH_VALUE_POINTS),
                "mediumValue": sum(1 for p in balances if MEDIUM_VALUE_POINTS <= p < HIGH_VALUE_POINTS),
                "lowValue": sum(1 for p in balances if p < MEDIUM_VALUE_POINTS),
            },
        }
