"""
User endpoints for API v1.

Registration, profile updates and the points balance of loyalty
program customers.  ``GET /`` lists every user or, with
``loyaltyProgramId``, only the members of one program.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from loyalty_api.app.core.db import get_db
from loyalty_api.app.core.store import Store
from loyalty_api.app.schemas.user import PointsOperation, UserCreate, UserUpdate
from loyalty_api.app.services.user_service import InsufficientPointsError, UserService
from loyalty_api.app.services.wallet_pass_service import WalletPassService

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")


@router.get("/", response_model=Dict[str, Any])
async def list_users(
    loyalty_program_id: Optional[str] = Query(None, alias="loyaltyProgramId"),
    db: Store = Depends(get_db),
) -> Dict[str, Any]:
    users = await UserService.list_users(db, loyalty_program_id=loyalty_program_id)
    return {"success": True, "data": users, "count": len(users)}


@router.get("/{user_id}", response_model=Dict[str, Any])
async def get_user(user_id: str, db: Store = Depends(get_db)) -> Dict[str, Any]:
    user = await UserService.get_user(db, user_id)
    if user is None:
        raise _not_found()
    return {"success": True, "data": user}


@router.post("/", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def register_user(user_in: UserCreate, db: Store = Depends(get_db)) -> Dict[str, Any]:
    """Зарегистрировать нового клиента.

    Returns 409 if a user with the same e-mail or phone already
    exists.  When ``loyaltyProgramId`` is given the user is enrolled in
    that program.
    """
    user = await UserService.create_user(db, user_in)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User already exists with this email or phone",
        )
    return {"success": True, "data": user, "message": "User created successfully"}


@router.put("/{user_id}", response_model=Dict[str, Any])
async def update_user(user_id: str, user_in: UserUpdate, db: Store = Depends(get_db)) -> Dict[str, Any]:
    user = await UserService.update_user(db, user_id, user_in)
    if user is None:
        raise _not_found()
    return {"success": True, "data": user, "message": "User updated successfully"}


@router.get("/{user_id}/points", response_model=Dict[str, Any])
async def get_points(user_id: str, db: Store = Depends(get_db)) -> Dict[str, Any]:
    user = await UserService.get_user(db, user_id)
    if user is None:
        raise _not_found()
    return {
        "success": True,
        "data": {"userId": user["id"], "points": user.get("points"), "lastUpdated": user.get("updated_at")},
    }


@router.post("/{user_id}/points/add", response_model=Dict[str, Any])
async def add_points(user_id: str, body: PointsOperation, db: Store = Depends(get_db)) -> Dict[str, Any]:
    user = await UserService.add_points(db, user_id, body.points)
    if user is None:
        raise _not_found()
    return {
        "success": True,
        "data": {
            "userId": user["id"],
            "pointsAdded": body.points,
            "totalPoints": user["points"],
            "description": body.description,
        },
        "message": f"{body.points} points added successfully",
    }


@router.post("/{user_id}/points/redeem", response_model=Dict[str, Any])
async def redeem_points(user_id: str, body: PointsOperation, db: Store = Depends(get_db)) -> Dict[str, Any]:
    """Списать баллы.  Returns 400 when the balance is insufficient."""
    try:
        user = await UserService.redeem_points(db, user_id, body.points)
    except InsufficientPointsError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {
        "success": True,
        "data": {
            "userId": user["id"],
            "pointsRedeemed": body.points,
            "remainingPoints": user["points"],
            "description": body.description,
        },
        "message": f"{body.points} points redeemed successfully",
    }


@router.get("/{user_id}/passes", response_model=Dict[str, Any])
async def list_user_passes(user_id: str, db: Store = Depends(get_db)) -> Dict[str, Any]:
    if await UserService.get_user(db, user_id) is None:
        raise _not_found()
    passes = await WalletPassService.list_user_passes(db, user_id)
    return {"success": True, "data": passes, "count": len(passes)}


@router.delete("/{user_id}", response_model=Dict[str, Any])
async def delete_user(user_id: str, db: Store = Depends(get_db)) -> Dict[str, Any]:
    if not await UserService.delete_user(db, user_id):
        raise _not_found()
    return {"success": True, "message": "User deleted successfully"}
