"""GET /v1/customers/{username}/balances - per-account net balances"""

import time
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request

from balance_gateway.api.v1.schemas import AccountBalanceSchema
from balance_gateway.api.dependencies import get_balance_aggregator, get_request_id
from balance_gateway.domain.aggregation import BalanceAggregator
from balance_gateway.domain.exceptions import AggregationTimeoutError, DataSourceError
from balance_gateway.infrastructure.observability.metrics import record_aggregation
from balance_gateway.infrastructure.observability.logging import log_balance_aggregation

router = APIRouter()


@router.get("/customers/{username}/balances", response_model=List[AccountBalanceSchema])
async def get_account_balances(
    username: str,
    request: Request,
    aggregator: BalanceAggregator = Depends(get_balance_aggregator),
):
    """
    Compute the net balance of every account listed on a customer.

    Returns:
        One entry per listed account id, in the customer's order.
        An unknown username yields an empty list.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        balances = await aggregator.aggregate(username)

    except AggregationTimeoutError as e:
        record_aggregation("timeout", 0)
        log_balance_aggregation(
            request_id, username, 0, "timeout", (time.time() - start_time) * 1000, e.kind.value, str(e)
        )
        raise HTTPException(status_code=504, detail="Balance aggregation timed out")

    except DataSourceError as e:
        record_aggregation("failed", 0)
        log_balance_aggregation(
            request_id, username, 0, "failed", (time.time() - start_time) * 1000, e.kind.value, str(e)
        )
        raise HTTPException(status_code=503, detail="Data source unavailable")

    outcome = "success" if balances else "empty"
    record_aggregation(outcome, len(balances))
    log_balance_aggregation(request_id, username, len(balances), outcome, (time.time() - start_time) * 1000)

    return [AccountBalanceSchema.model_validate(b) for b in balances]
