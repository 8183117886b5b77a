from fastapi import APIRouter

from artserve.api.endpoints import art

router = APIRouter()
router.include_router(art.router, tags=["art"])
