from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from app.api.endpoints import transactions

api_router = APIRouter()


@api_router.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return "hi!"


api_router.include_router(transactions.router, prefix="/transaction", tags=["Transactions"])
