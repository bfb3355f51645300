# API v1 routes
from fastapi import APIRouter

from braincache.api.v1 import (
    admin,
    auth,
    comments,
    content,
    reports,
    sharing,
    spaces,
    subscription,
    users,
)

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(spaces.router, prefix="/spaces", tags=["spaces"])
router.include_router(comments.router, prefix="/spaces", tags=["comments"])
router.include_router(content.router, prefix="/content", tags=["content"])
router.include_router(sharing.router, prefix="/share", tags=["sharing"])
router.include_router(sharing.brain_router, prefix="/brain", tags=["sharing"])
router.include_router(reports.router, prefix="/reports", tags=["reports"])
router.include_router(subscription.router, prefix="/subscription", tags=["subscription"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])
