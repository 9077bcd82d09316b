"""
Loyalty program endpoints for API v1.

Programs can be listed for all companies or filtered by ``companyId``.
``GET /{id}`` returns the member count by default and the full member
list, passes and point totals with ``includeDetails=true``.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from loyalty_api.app.core.db import get_db
from loyalty_api.app.core.store import Store
from loyalty_api.app.schemas.loyalty import LoyaltyProgramCreate, LoyaltyProgramUpdate
from loyalty_api.app.services.loyalty_service import LoyaltyProgramService

router = APIRouter()

NOT_FOUND = "Loyalty program not found"


@router.get("/", response_model=Dict[str, Any])
async def list_programs(
    company_id: Optional[str] = Query(None, alias="companyId"),
    db: Store = Depends(get_db),
) -> Dict[str, Any]:
    programs = await LoyaltyProgramService.list_programs(db, company_id=company_id)
    return {"success": True, "data": programs, "count": len(programs)}


@router.get("/{program_id}", response_model=Dict[str, Any])
async def get_program(
    program_id: str,
    include_details: bool = Query(False, alias="includeDetails"),
    db: Store = Depends(get_db),
) -> Dict[str, Any]:
    """Return one program, optionally with members and passes."""
    if include_details:
        program = await LoyaltyProgramService.get_with_details(db, program_id)
    else:
        program = await LoyaltyProgramService.get_program(db, program_id)
        if program is not None:
            program["usersCount"] = await LoyaltyProgramService.get_users_count(db, program_id)
    if program is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    return {"success": True, "data": program}


@router.post("/", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def create_program(program_in: LoyaltyProgramCreate, db: Store = Depends(get_db)) -> Dict[str, Any]:
    program = await LoyaltyProgramService.create_program(db, program_in)
    return {"success": True, "data": program, "message": "Loyalty program created successfully"}


@router.put("/{program_id}", response_model=Dict[str, Any])
async def update_program(
    program_id: str,
    program_in: LoyaltyProgramUpdate,
    db: Store = Depends(get_db),
) -> Dict[str, Any]:
    program = await LoyaltyProgramService.update_program(db, program_id, program_in)
    if program is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    return {"success": True, "data": program, "message": "Loyalty program updated successfully"}


@router.delete("/{program_id}", response_model=Dict[str, Any])
async def delete_program(program_id: str, db: Store = Depends(get_db)) -> Dict[str, Any]:
    if not await LoyaltyProgramService.delete_program(db, program_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    return {"success": True, "message": "Loyalty program deleted successfully"}
