"""GET /v1/accounts - account and transaction bucket lookups"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from balance_gateway.api.v1.schemas import AccountSchema, TransactionBucketSchema
from balance_gateway.api.dependencies import get_db
from balance_gateway.infrastructure.database.repositories import AccountRepository, TransactionBucketRepository
from balance_gateway.domain.exceptions import DataSourceError

router = APIRouter()


@router.get("/accounts", response_model=List[AccountSchema])
def list_accounts(db: Session = Depends(get_db)):
    """List every account"""
    try:
        accounts = AccountRepository(db).list_accounts()
    except DataSourceError:
        raise HTTPException(status_code=503, detail="Data source unavailable")
    return [AccountSchema.model_validate(a) for a in accounts]


@router.get("/accounts/{account_id}", response_model=AccountSchema)
def get_account(account_id: int, db: Session = Depends(get_db)):
    try:
        account = AccountRepository(db).get_account(account_id)
    except DataSourceError:
        raise HTTPException(status_code=503, detail="Data source unavailable")

    if not account:
        raise HTTPException(status_code=404, detail="Account not found")

    return AccountSchema.model_validate(account)


@router.get("/accounts/{account_id}/transaction-buckets", response_model=List[TransactionBucketSchema])
def get_transaction_buckets(account_id: int, db: Session = Depends(get_db)):
    """
    Retrieve the transaction buckets stored for an account.

    Returns:
        Buckets ordered by window start; empty when the account has none
    """
    try:
        buckets = TransactionBucketRepository(db).get_by_account_id(account_id)
    except DataSourceError:
        raise HTTPException(status_code=503, detail="Data source unavailable")
    return [TransactionBucketSchema.model_validate(b) for b in buckets]
