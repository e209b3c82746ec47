"""
Endpoint subpackage for API v1.

Each module defines an APIRouter for one domain (users, auth,
profile); they are aggregated in ``router.py``.
"""
