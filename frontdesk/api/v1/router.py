"""
API v1 Router - Main Entry Point
Aggregates all v1 endpoints of the front desk API
"""

from fastapi import APIRouter

from frontdesk.api.v1 import auth, exports, history, rooms, users

router = APIRouter(
    responses={
        400: {"description": "Bad Request"},
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not Found"},
        409: {"description": "Conflict"},
        422: {"description": "Validation Error"},
        500: {"description": "Internal Server Error"},
    }
)

router.include_router(auth.router)
router.include_router(users.router)
router.include_router(rooms.router)
router.include_router(history.router)
router.include_router(exports.router)
