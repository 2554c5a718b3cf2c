from typing import List
from fastapi import APIRouter, Depends, Response, status

from app.api.dependencies import get_transaction_gateway
from app.api.schemas.common import ErrorResponse
from app.transactions.gateway import TransactionGateway
from app.transactions.schemas import Transaction


router = APIRouter()


@router.post(
    "",
    status_code=status.HTTP_200_OK,
    response_class=Response,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
async def create_transaction(
    transaction: Transaction,
    gateway: TransactionGateway = Depends(get_transaction_gateway)
) -> Response:
    """
    Record a transaction.

    The body must carry all ten fields. Invalid payloads are rejected with
    400 before anything is written; storage failures return 500. A
    successful insert returns an empty 200 response.
    """
    await gateway.insert(transaction)
    return Response(status_code=status.HTTP_200_OK)


@router.get("", response_model=List[Transaction])
async def list_transactions(
    gateway: TransactionGateway = Depends(get_transaction_gateway)
) -> List[Transaction]:
    """Get all stored transactions, in no particular order"""
    return await gateway.fetch_all()
