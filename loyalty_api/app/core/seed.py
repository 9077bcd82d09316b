"""
Demo fixture rows loaded into the store at startup.

Two companies (a coffee house and a beauty salon), one loyalty
program, two customers and two wallet passes, plus the membership and
pass assignment that link them.  Identifiers are fixed so that demo
clients can address the rows directly.
"""

import json
from typing import Dict, List

from .query import utc_now_iso
from .tables import Record, Table

COFFEE_HOUSE_ID = "550e8400-e29b-41d4-a716-446655440001"
BEAUTY_SALON_ID = "550e8400-e29b-41d4-a716-446655440002"
COFFEE_PROGRAM_ID = "550e8400-e29b-41d4-a716-446655440010"
IVAN_ID = "550e8400-e29b-41d4-a716-446655440020"
MARIA_ID = "550e8400-e29b-41d4-a716-446655440021"
COFFEE_PASS_ID = "550e8400-e29b-41d4-a716-446655440030"
BEAUTY_PASS_ID = "550e8400-e29b-41d4-a716-446655440031"


def _barcode(message: str) -> str:
    return json.dumps([{"format": "PKBarcodeFormatQR", "message": message, "messageEncoding": "iso-8859-1"}])


def demo_data() -> Dict[Table, List[Record]]:
    """Build a fresh set of demo rows stamped with the current time."""
    now = utc_now_iso()
    stamps = {"created_at": now, "updated_at": now}
    return {
        Table.COMPANIES: [
            {"id": COFFEE_HOUSE_ID, "name": "Coffee House Demo", "admin_email": "admin@coffeehouse.com", "logo": None, **stamps},
            {"id": BEAUTY_SALON_ID, "name": "Beauty Salon Demo", "admin_email": "admin@beautysalon.com", "logo": None, **stamps},
        ],
        Table.LOYALTY_PROGRAMS: [
            {
                "id": COFFEE_PROGRAM_ID,
                "company_id": COFFEE_HOUSE_ID,
                "name": "Coffee Loyalty Program",
                "template": "coffee",
                "invite_link": "https://ly.app/join/coffee",
                **stamps,
            },
        ],
        Table.USERS: [
            {
                "id": IVAN_ID,
                "name": "Иван Петров",
                "email": "ivan@example.com",
                "phone": "+7123456789",
                "birthday": "1990-01-01",
                "points": 150,
                "wallet_pass_url": None,
                **stamps,
            },
            {
                "id": MARIA_ID,
                "name": "Мария Сидорова",
                "email": "maria@example.com",
                "phone": "+7987654321",
                "birthday": "1985-05-15",
                "points": 320,
                "wallet_pass_url": None,
                **stamps,
            },
        ],
        Table.WALLET_PASSES: [
            {
                "id": COFFEE_PASS_ID,
                "pass_type_identifier": "pass.com.ly.coffee",
                "organization_name": "Coffee House Demo",
                "description": "Карта лояльности кофейни",
                "serial_number": "LY-COFFEE-001",
                "pass_type": "storeCard",
                "background_color": "#8B4513",
                "foreground_color": "#FFFFFF",
                "fields": json.dumps({
                    "headerFields": [{"key": "points", "label": "Баллы", "value": "150"}],
                    "primaryFields": [{"key": "name", "label": "Имя", "value": "Иван Петров"}],
                }),
                "barcodes": _barcode("LY-COFFEE-001"),
                "logo": None,
                "company_id": COFFEE_HOUSE_ID,
                "loyalty_program_id": COFFEE_PROGRAM_ID,
                **stamps,
            },
            {
                "id": BEAUTY_PASS_ID,
                "pass_type_identifier": "pass.com.ly.beauty",
                "organization_name": "Beauty Salon Demo",
                "description": "Карта клиента салона красоты",
                "serial_number": "LY-BEAUTY-001",
                "pass_type": "storeCard",
                "background_color": "#FF69B4",
                "foreground_color": "#FFFFFF",
                "fields": json.dumps({
                    "headerFields": [{"key": "discount", "label": "Скидка", "value": "15%"}],
                    "primaryFields": [{"key": "name", "label": "Имя", "value": "Мария Сидорова"}],
                }),
                "barcodes": _barcode("LY-BEAUTY-001"),
                "logo": None,
                "company_id": BEAUTY_SALON_ID,
                "loyalty_program_id": None,
                **stamps,
            },
        ],
        Table.LOYALTY_PROGRAM_USERS: [
            {"id": "550e8400-e29b-41d4-a716-446655440040", "user_id": IVAN_ID, "loyalty_program_id": COFFEE_PROGRAM_ID, "joined_at": now},
        ],
        Table.USER_WALLET_PASSES: [
            {"id": "550e8400-e29b-41d4-a716-446655440050", "user_id": IVAN_ID, "wallet_pass_id": COFFEE_PASS_ID, "assigned_at": now},
        ],
    }
