# transfer_api/transactions/transaction_controller.py
import logging
import time
from typing import Any

from fastapi import APIRouter, Body, Depends, Request, Response
from fastapi.responses import JSONResponse

from transfer_api.transactions.transaction_service import AdmissionOutcome, TransactionService
from transfer_api.transactions.transactions_schema import TransactionAck, TransactionOut

logger = logging.getLogger(__name__)

router = APIRouter(tags=["transactions"])


def get_transaction_service(request: Request) -> TransactionService:
    return request.app.state.transaction_service


@router.post("/transactions", status_code=202)
@router.post("/v1/webhooks/transactions", status_code=202, include_in_schema=False)
async def receive_transaction(
    payload: Any = Body(None),
    service: TransactionService = Depends(get_transaction_service),
):
    start = time.perf_counter()
    logger.info(f"Received webhook: {payload}")

    admission = await service.admit(payload)

    logger.info(f"Webhook processed in {(time.perf_counter() - start) * 1000:.0f}ms")
    if admission.outcome is AdmissionOutcome.DUPLICATE:
        return Response(status_code=202)
    ack = TransactionAck(transaction_id=admission.transaction_id)
    return JSONResponse(status_code=202, content=ack.model_dump())


@router.get("/transactions/{transaction_id}", response_model=TransactionOut)
@router.get("/v1/transactions/{transaction_id}", response_model=TransactionOut, include_in_schema=False)
async def get_transaction(
    transaction_id: str,
    service: TransactionService = Depends(get_transaction_service),
):
    record = await service.get(transaction_id)
    return TransactionOut.from_record(record)
