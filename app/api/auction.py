"""Auction fee calculation endpoints with optional Redis caching"""
import json
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from app.schemas.auction import CalculateRequest, ErrorOut, FeeBreakdown, FeeConfig, HealthOut
from app.services.auction import calculate_fees
from app.core.config import settings
from app.core.exceptions import InvalidFeeInput
from app.core.metrics import cache_hits, cache_misses, fee_calculations
from app.core.rate_limit import check_rate_limit
from app.core.redis import get_redis
from app.utils.hashing import payload_hash

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auction", tags=["auction"])


def get_fee_config() -> FeeConfig:
    return settings.fee_config


def _generate_cache_key(req: CalculateRequest, config: FeeConfig) -> str:
    return f"fees:{payload_hash(req.model_dump(mode='json'), config.model_dump())}"


async def _get_cached(cache_key: str):
    redis = get_redis()
    if redis is None:
        return None
    try:
        cached = await redis.get(cache_key)
    except Exception as e:
        logger.warning(f"Cache retrieval failed: {e}")
        return None
    if not cached:
        cache_misses.inc()
        return None
    cache_hits.inc()
    return FeeBreakdown.model_validate(json.loads(cached))


async def _set_cached(cache_key: str, result: FeeBreakdown) -> None:
    redis = get_redis()
    if redis is None:
        return
    try:
        await redis.set(
            cache_key,
            result.model_dump_json(),
            ex=settings.PRICE_CACHE_TTL
        )
    except Exception as e:
        logger.warning(f"Cache write failed: {e}")


@router.post(
    "/calculate",
    response_model=FeeBreakdown,
    response_model_by_alias=True,
    responses={400: {"model": ErrorOut}, 429: {"model": ErrorOut}, 500: {"model": ErrorOut}},
    dependencies=[Depends(check_rate_limit)],
)
async def calculate(req: CalculateRequest, config: FeeConfig = Depends(get_fee_config)):
    """Calculate the auction fee breakdown for a vehicle."""
    logger.info(f"Calculating fees for {req.vehicle_type} vehicle with price {req.vehicle_price}")

    cache_key = _generate_cache_key(req, config)
    cached = await _get_cached(cache_key)
    if cached is not None:
        return cached

    try:
        result = calculate_fees(req.vehicle_price, req.vehicle_type, config)
    except InvalidFeeInput:
        fee_calculations.labels(vehicle_type=str(req.vehicle_type), outcome="invalid").inc()
        raise
    fee_calculations.labels(vehicle_type=str(req.vehicle_type), outcome="success").inc()
    logger.info(f"Calculation complete. Grand total: {result.grand_total}")

    await _set_cached(cache_key, result)
    return result


@router.get("/health", response_model=HealthOut)
async def health():
    return HealthOut(status="healthy", timestamp=datetime.now(timezone.utc))
