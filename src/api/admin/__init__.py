"""Admin endpoints, all requiring a valid bearer token."""

from fastapi import APIRouter, Depends

from src.api.admin.issues import router as issues_router
from src.api.admin.newsletters import router as newsletters_router
from src.api.admin.subscribers import router as subscribers_router
from src.api.security import verify_token

router = APIRouter(prefix="/admin", dependencies=[Depends(verify_token)])
router.include_router(newsletters_router)
router.include_router(issues_router)
router.include_router(subscribers_router)

__all__ = ["router"]
