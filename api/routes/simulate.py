"""House-edge simulation endpoint."""

import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from api.limiter import limiter
from api.schemas import ErrorResponse, SimulateRequest, SimulationResponse
from config import config
from core.errors import InvalidRulesError
from core.rules import DEFAULT_HOUSE_RULES, RULES_VERSION, HouseRules
from core.statistics.house_edge import HouseEdgeCalculator, simulate_house_edge

router = APIRouter()
logger = logging.getLogger(__name__)


def resolve_rules(payload: SimulateRequest | None) -> HouseRules:
    """Merge request overrides over the default rules."""
    if payload is None or payload.rules is None:
        return DEFAULT_HOUSE_RULES
    return payload.rules.apply_to(DEFAULT_HOUSE_RULES)


def resolve_num_hands(payload: SimulateRequest | None) -> int:
    """Requested hand count, or the configured default when absent or zero."""
    num_hands = payload.num_hands if payload is not None else None
    return num_hands or config.simulation.default_num_hands


@router.post(
    "",
    response_model=SimulationResponse,
    responses={500: {"model": ErrorResponse}},
)
@limiter.limit(f"{config.rate_limit.simulations_per_minute}/minute")
async def simulate(request: Request, payload: SimulateRequest | None = None):
    """Compute the exact house edge for the requested rules."""
    try:
        rules = resolve_rules(payload)
    except InvalidRulesError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    num_hands = resolve_num_hands(payload)
    if num_hands > config.simulation.max_num_hands:
        raise HTTPException(
            status_code=422,
            detail=f"numHands must be at most {config.simulation.max_num_hands}",
        )

    logger.info("Simulating house edge: num_hands=%d rules=%s", num_hands, rules)
    try:
        result = await run_in_threadpool(simulate_house_edge, num_hands, rules)
        estimate = HouseEdgeCalculator(rules).calculate()
    except Exception:
        logger.exception("House edge simulation failed")
        return JSONResponse(status_code=500, content={"error": "Simulation failed"})

    return SimulationResponse.from_result(result, rules, float(estimate), RULES_VERSION)
