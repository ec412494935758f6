"""API sub-routers assembled into a single api_router."""

from fastapi import APIRouter

from src.api.router import router as core_router
from src.api.routers.diwali_fund import router as diwali_fund_router
from src.api.routers.ledger import router as ledger_router
from src.api.routers.users import router as users_router

api_router = APIRouter()

api_router.include_router(core_router)
api_router.include_router(ledger_router)
api_router.include_router(users_router, prefix="/users", tags=["users"])
api_router.include_router(diwali_fund_router, prefix="/diwali-fund", tags=["diwali_fund"])
