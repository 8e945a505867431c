"""GET /v1/customers - customer profile lookups"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from balance_gateway.api.v1.schemas import CustomerSchema
from balance_gateway.api.dependencies import get_db
from balance_gateway.infrastructure.database.repositories import CustomerRepository
from balance_gateway.domain.exceptions import DataSourceError

router = APIRouter()


@router.get("/customers", response_model=List[CustomerSchema])
def list_customers(db: Session = Depends(get_db)):
    """List every customer"""
    try:
        customers = CustomerRepository(db).list_customers()
    except DataSourceError:
        raise HTTPException(status_code=503, detail="Data source unavailable")
    return [CustomerSchema.from_domain(c) for c in customers]


@router.get("/customers/{username}", response_model=CustomerSchema)
def get_customer(username: str, db: Session = Depends(get_db)):
    """
    Retrieve a customer by username.

    Returns:
        Profile with account ids and tier entries flattened to a list
    """
    try:
        customer = CustomerRepository(db).get_by_username(username)
    except DataSourceError:
        raise HTTPException(status_code=503, detail="Data source unavailable")

    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")

    return CustomerSchema.from_domain(customer)
