from __future__ import annotations

from typing import Dict, List

from fastapi import APIRouter, Depends, Request, Response

from apps.backend.services.loyalty.points_ledger import PointsLedger
from apps.backend.services.loyalty.points_requests import (
    load_body,
    parse_add_body,
    parse_spend_body,
)


router = APIRouter(tags=["points"])


def get_ledger(request: Request) -> PointsLedger:
    return request.app.state.ledger


@router.post("/add")
async def add_points(request: Request, ledger: PointsLedger = Depends(get_ledger)):
    body = parse_add_body(load_body(await request.body()))
    ledger.record(body.payer, body.points, body.timestamp)
    return Response(status_code=200)


@router.post("/spend")
async def spend_points(request: Request, ledger: PointsLedger = Depends(get_ledger)) -> List[Dict]:
    body = parse_spend_body(load_body(await request.body()))
    lines = ledger.spend(body.points)
    return [line.to_dict() for line in lines]


@router.get("/balance")
async def get_balance(ledger: PointsLedger = Depends(get_ledger)) -> Dict[str, int]:
    return ledger.balances()
