"""
Analytics endpoints for API v1.

Read-only aggregates over the store: a global dashboard and views
scoped to one company or one loyalty program.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from loyalty_api.app.core.db import get_db
from loyalty_api.app.core.store import Store
from loyalty_api.app.services.analytics_service import AnalyticsService

router = APIRouter()


@router.get("/dashboard", response_model=Dict[str, Any])
async def dashboard(db: Store = Depends(get_db)) -> Dict[str, Any]:
    return {
        "success": True,
        "data": await AnalyticsService.dashboard(db),
        "generatedAt": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/company/{company_id}", response_model=Dict[str, Any])
async def company_analytics(company_id: str, db: Store = Depends(get_db)) -> Dict[str, Any]:
    analytics = await AnalyticsService.company_analytics(db, company_id)
    if analytics is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")
    return {"success": True, "data": analytics}


@router.get("/loyalty-program/{program_id}", response_model=Dict[str, Any])
async def program_analytics(program_id: str, db: Store = Depends(get_db)) -> Dict[str, Any]:
    analytics = await AnalyticsService.program_analytics(db, program_id)
    if analytics is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Loyalty program not found")
    return {"success": True, "data": analytics}
