"""
Top-level router for version 1 of the API.

This router aggregates the domain routers (companies, loyalty
programs, users, passes, analytics) under a unified prefix.  When a
new domain is introduced, include its router here.
"""

from fastapi import APIRouter

from .endpoints import analytics, companies, loyalty_programs, passes, users

router = APIRouter()

router.include_router(companies.router, prefix="/companies", tags=["companies"])
router.include_router(loyalty_programs.router, prefix="/loyalty-programs", tags=["loyalty-programs"])
router.include_router(passes.router, prefix="/passes", tags=["passes"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
