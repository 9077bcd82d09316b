"""
Company endpoints for API v1.

CRUD over companies plus a detail view that embeds the company's
loyalty programs and wallet passes, and a statistics endpoint.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status

from loyalty_api.app.core.db import get_db
from loyalty_api.app.core.store import Store
from loyalty_api.app.schemas.company import CompanyCreate, CompanyUpdate
from loyalty_api.app.services.company_service import CompanyService

router = APIRouter()


@router.get("/", response_model=Dict[str, Any])
async def list_companies(db: Store = Depends(get_db)) -> Dict[str, Any]:
    """Return all companies, newest first."""
    companies = await CompanyService.list_companies(db)
    return {"success": True, "data": companies, "count": len(companies)}


@router.get("/{company_id}", response_model=Dict[str, Any])
async def get_company(company_id: str, db: Store = Depends(get_db)) -> Dict[str, Any]:
    """Return a company with its loyalty programs and wallet passes."""
    company = await CompanyService.get_company_with_programs(db, company_id)
    if company is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")
    return {"success": True, "data": company}


@router.get("/{company_id}/stats", response_model=Dict[str, Any])
async def get_company_stats(company_id: str, db: Store = Depends(get_db)) -> Dict[str, Any]:
    stats = await CompanyService.get_stats(db, company_id)
    if stats is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")
    return {"success": True, "data": stats}


@router.post("/", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def create_company(company_in: CompanyCreate, db: Store = Depends(get_db)) -> Dict[str, Any]:
    company = await CompanyService.create_company(db, company_in)
    return {"success": True, "data": company, "message": "Company created successfully"}


@router.put("/{company_id}", response_model=Dict[str, Any])
async def update_company(
    company_id: str,
    company_in: CompanyUpdate,
    db: Store = Depends(get_db),
) -> Dict[str, Any]:
    company = await CompanyService.update_company(db, company_id, company_in)
    if company is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")
    return {"success": True, "data": company, "message": "Company updated successfully"}


@router.delete("/{company_id}", response_model=Dict[str, Any])
async def delete_company(company_id: str, db: Store = Depends(get_db)) -> Dict[str, Any]:
    deleted = await CompanyService.delete_company(db, company_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")
    return {"success": True, "message": "Company deleted successfully"}
