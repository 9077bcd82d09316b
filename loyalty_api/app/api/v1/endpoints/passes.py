"""
Wallet pass endpoints for API v1.

Passes are created from a JSON body; logo upload is handled elsewhere
and only the resulting file name or URL is stored.  The download
endpoint returns the pass as JSON with the ``.pkpass`` content type:
signing a real PassKit bundle requires Apple certificates.
"""

from typing import Any, Dict, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from loyalty_api.app.core.db import get_db
from loyalty_api.app.core.store import Store
from loyalty_api.app.schemas.wallet_pass import PassAssignment, WalletPassCreate, WalletPassUpdate
from loyalty_api.app.services.wallet_pass_service import WalletPassService

router = APIRouter()

PKPASS_MEDIA_TYPE = "application/vnd.apple.pkpass"


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pass not found")


def _attachment(filename: str) -> str:
    # Header values must be latin-1; non-ASCII names go into filename*.
    fallback = filename.encode("ascii", "ignore").decode("ascii") or "pass.pkpass"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


@router.get("/", response_model=Dict[str, Any])
async def list_passes(
    company_id: Optional[str] = Query(None, alias="companyId"),
    loyalty_program_id: Optional[str] = Query(None, alias="loyaltyProgramId"),
    pass_type: Optional[str] = Query(None, alias="passType"),
    db: Store = Depends(get_db),
) -> Dict[str, Any]:
    passes = await WalletPassService.list_passes(
        db,
        company_id=company_id,
        loyalty_program_id=loyalty_program_id,
        pass_type=pass_type,
    )
    return {"success": True, "data": passes, "count": len(passes)}


@router.get("/stats", response_model=Dict[str, Any])
async def pass_stats(db: Store = Depends(get_db)) -> Dict[str, Any]:
    return {"success": True, "data": await WalletPassService.get_stats(db)}


@router.get("/{pass_id}", response_model=Dict[str, Any])
async def get_pass(pass_id: str, db: Store = Depends(get_db)) -> Dict[str, Any]:
    wallet_pass = await WalletPassService.get_pass(db, pass_id)
    if wallet_pass is None:
        raise _not_found()
    return {"success": True, "data": wallet_pass}


@router.post("/", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def create_pass(pass_in: WalletPassCreate, db: Store = Depends(get_db)) -> Dict[str, Any]:
    wallet_pass = await WalletPassService.create_pass(db, pass_in)
    return {"success": True, "data": wallet_pass, "message": "Pass created successfully"}


@router.put("/{pass_id}", response_model=Dict[str, Any])
async def update_pass(pass_id: str, pass_in: WalletPassUpdate, db: Store = Depends(get_db)) -> Dict[str, Any]:
    wallet_pass = await WalletPassService.update_pass(db, pass_id, pass_in)
    if wallet_pass is None:
        raise _not_found()
    return {"success": True, "data": wallet_pass, "message": "Pass updated successfully"}


@router.get("/{pass_id}/download")
async def download_pass(pass_id: str, db: Store = Depends(get_db)) -> JSONResponse:
    wallet_pass = await WalletPassService.get_pass(db, pass_id)
    if wallet_pass is None:
        raise _not_found()
    filename = f"{wallet_pass.get('organization_name')}-{wallet_pass['id']}.pkpass"
    return JSONResponse(
        content={
            "success": True,
            "message": "This is a mock download. Real implementation requires Apple PassKit certificates.",
            "data": wallet_pass,
        },
        media_type=PKPASS_MEDIA_TYPE,
        headers={"Content-Disposition": _attachment(filename)},
    )


@router.post("/{pass_id}/assign", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def assign_pass(pass_id: str, body: PassAssignment, db: Store = Depends(get_db)) -> Dict[str, Any]:
    try:
        result = await WalletPassService.assign_to_user(db, pass_id, body.user_id)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"success": True, "data": result, "message": "Pass assigned successfully"}


@router.delete("/{pass_id}", response_model=Dict[str, Any])
async def delete_pass(pass_id: str, db: Store = Depends(get_db)) -> Dict[str, Any]:
    if not await WalletPassService.delete_pass(db, pass_id):
        raise _not_found()
    return {"success": True, "message": "Pass deleted successfully"}
