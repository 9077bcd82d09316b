"""
Endpoint subpackage for API v1.

Each module in this package defines an APIRouter for one domain
(companies, loyalty programs, users, passes, analytics).  The routers
are aggregated in ``router.py`` at the package level.
"""
