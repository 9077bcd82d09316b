"""
Service layer for digital wallet passes.

Passes reference a company and, optionally, a loyalty program; both
are resolved with left joins so that a pass whose company or program
was removed is still listed.  ``fields`` and ``barcodes`` are stored
as JSON text and decoded when a pass is returned to the API layer.

Passes are handed to customers through the ``user_wallet_passes``
junction table (``assign_to_user`` / ``list_user_passes``).
"""

from __future__ import annotations

import json
import logging
import random
import string
import time
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from loyalty_api.app.core.query import QueryBuilder, utc_now_iso
from loyalty_api.app.core.store import Store
from loyalty_api.app.core.tables import Record, Table
from loyalty_api.app.schemas.wallet_pass import WalletPassCreate, WalletPassUpdate

_JSON_FIELDS = ("fields", "barcodes")


def generate_serial_number() -> str:
    """Return a serial of the form ``LY-<epoch millis>-<9 random chars>``."""
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"LY-{int(time.time() * 1000)}-{suffix}"


class WalletPassService:
    """Service class for managing wallet passes."""

    @classmethod
    def _joined(cls, db: Store) -> QueryBuilder:
        return (
            db(Table.WALLET_PASSES)
            .left_join(Table.COMPANIES, "wallet_passes.company_id", "companies.id")
            .left_join(Table.LOYALTY_PROGRAMS, "wallet_passes.loyalty_program_id", "loyalty_programs.id")
            .select(
                "wallet_passes.*",
                "companies.name as company_name",
                "loyalty_programs.name as loyalty_program_name",
            )
        )

    @classmethod
    async def list_passes(
        cls,
        db: Store,
        company_id: Optional[str] = None,
        loyalty_program_id: Optional[str] = None,
        pass_type: Optional[str] = None,
    ) -> List[Record]:
        """Return passes, newest first, filtered by any of the given values."""
        query = cls._joined(db).order_by("wallet_passes.created_at", "desc")
        if company_id:
            query = query.where("wallet_passes.company_id", company_id)
        if loyalty_program_id:
            query = query.where("wallet_passes.loyalty_program_id", loyalty_program_id)
        if pass_type:
            query = query.where("wallet_passes.pass_type", pass_type)
        rows = await query
        return [cls._decode(row) for row in rows]

    @classmethod
    async def get_pass(cls, db: Store, pass_id: str) -> Optional[Record]:
        row = await cls._joined(db).where("wallet_passes.id", pass_id).first()
        return cls._decode(row) if row is not None else None

    @classmethod
    async def find_by_serial_number(cls, db: Store, serial_number: str) -> Optional[Record]:
        row = await db(Table.WALLET_PASSES).where("serial_number", serial_number).first()
        return cls._decode(row) if row is not None else None

    @classmethod
    async def create_pass(cls, db: Store, data: WalletPassCreate) -> Record:
        """Insert a pass, filling in the identifier and serial if missing."""
        logger = logging.getLogger(__name__)
        now = utc_now_iso()
        fields = data.pass_fields.model_dump(exclude_none=True) if data.pass_fields else {}
        barcodes = [barcode.model_dump() for barcode in data.barcodes or []]
        [created] = await db(Table.WALLET_PASSES).insert({
            "pass_type_identifier": data.pass_type_identifier or f"pass.com.ly.{uuid.uuid4().hex}",
            "organization_name": data.organization_name,
            "description": data.description,
            "serial_number": data.serial_number or generate_serial_number(),
            "pass_type": data.pass_type,
            "background_color": data.background_color,
            "foreground_color": data.foreground_color,
            "fields": json.dumps(fields),
            "barcodes": json.dumps(barcodes),
            "logo": data.logo,
            "company_id": data.company_id,
            "loyalty_program_id": data.loyalty_program_id,
            "created_at": now,
            "updated_at": now,
        }).returning("id")
        logger.info("Created wallet pass %s", created["id"])
        return await cls.get_pass(db, created["id"])

    @classmethod
    async def update_pass(cls, db: Store, pass_id: str, data: WalletPassUpdate) -> Optional[Record]:
        """Change only the provided fields.  Returns ``None`` if the pass is missing."""
        logger = logging.getLogger(__name__)
        changes: Dict[str, Any] = data.model_dump(exclude_unset=True, exclude_none=True)
        if "pass_fields" in changes:
            changes["fields"] = json.dumps(changes.pop("pass_fields"))
        if "barcodes" in changes:
            changes["barcodes"] = json.dumps(changes["barcodes"])
        rows = await db(Table.WALLET_PASSES).where("id", pass_id).update(changes).returning("id")
        if not rows:
            return None
        logger.info("Updated wallet pass %s", pass_id)
        return await cls.get_pass(db, pass_id)

    @classmethod
    async def delete_pass(cls, db: Store, pass_id: str) -> bool:
        logger = logging.getLogger(__name__)
        removed = await db(Table.WALLET_PASSES).where("id", pass_id).del_()
        if not removed:
            return False
        await db(Table.USER_WALLET_PASSES).where("wallet_pass_id", pass_id).delete()
        logger.info("Deleted wallet pass %s", pass_id)
        return True

    @classmethod
    async def assign_to_user(cls, db: Store, pass_id: str, user_id: str) -> Dict[str, Record]:
        """Link a pass to a user.

        Raises ``LookupError`` if either the pass or the user is missing.
        """
        logger = logging.getLogger(__name__)
        wallet_pass = await cls.get_pass(db, pass_id)
        user = await db(Table.USERS).where("id", user_id).first()
        if wallet_pass is None or user is None:
            raise LookupError("Pass or user not found")
        await db(Table.USER_WALLET_PASSES).insert({
            "user_id": user_id,
            "wallet_pass_id": pass_id,
            "assigned_at": utc_now_iso(),
        }).returning("*")
        logger.info("Assigned wallet pass %s to user %s", pass_id, user_id)
        return {"pass": wallet_pass, "user": user}

    @classmethod
    async def list_user_passes(cls, db: Store, user_id: str) -> List[Record]:
        """Return the passes assigned to a user, most recently assigned first."""
        assignments = await (
            db(Table.USER_WALLET_PASSES)
            .where("user_id", user_id)
            .order_by("assigned_at", "desc")
        )
        passes = {row["id"]: row for row in await cls._joined(db)}
        return [
            cls._decode({**passes[a["wallet_pass_id"]], "assigned_at": a.get("assigned_at")})
            for a in assignments
            if a.get("wallet_pass_id") in passes
        ]

    @classmethod
    async def get_stats(cls, db: Store) -> Dict[str, Any]:
        """Total passes, passes per type and passes created in the last 30 days."""
        rows = await db(Table.WALLET_PASSES)
        by_type: Dict[str, int] = {}
        for row in rows:
            by_type[row.get("pass_type")] = by_type.get(row.get("pass_type"), 0) + 1
        cutoff = datetime.now(timezone.utc) - timedelta(days=30)
        return {
            "total": len(rows),
            "byType": by_type,
            "recentCount": sum(1 for row in rows if _created_after(row, cutoff)),
        }

    @staticmethod
    def _decode(row: Record) -> Record:
        """Decode JSON-encoded columns; undecodable values become ``None``."""
        for name in _JSON_FIELDS:
            value = row.get(name)
            if isinstance(value, str):
                try:
                    row[name] = json.loads(value)
                except json.JSONDecodeError:
                    row[name] = None
        return row


def _created_after(row: Record, cutoff: datetime) -> bool:
    try:
        created = datetime.fromisoformat(row.get("created_at") or "")
    except (TypeError, ValueError):
        return False
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created >= cutoff
