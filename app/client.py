"""HTTP client for the auction fee calculation endpoint"""
import logging
from typing import Optional

import httpx

from app.core.config import settings
from app.core.enums import VehicleType
from app.schemas.auction import FeeBreakdown

logger = logging.getLogger(__name__)


class FeeApiError(Exception):

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def get_api_base_url(base_url: Optional[str] = None) -> str:
    url = base_url or settings.API_BASE_URL
    if not url:
        raise FeeApiError("API_BASE_URL is not defined in your environment.")
    return url.rstrip("/")


class AuctionFeeClient:
    """Posts calculation requests and parses the fee breakdown.

    Pass `transport` to route requests somewhere other than the network,
    e.g. httpx.ASGITransport(app=app) in tests.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = get_api_base_url(base_url)
        self.timeout = timeout if timeout is not None else settings.API_TIMEOUT
        self.transport = transport

    async def calculate_fees(self, vehicle_price: float, vehicle_type: VehicleType) -> FeeBreakdown:
        payload = {"vehiclePrice": vehicle_price, "vehicleType": str(vehicle_type)}

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(f"{self.base_url}/api/auction/calculate", json=payload)

        if not response.is_success:
            logger.warning(f"Fee calculation request failed with status {response.status_code}")
            raise FeeApiError(
                f"Failed to calculate fees (status {response.status_code}): {_error_detail(response)}",
                status_code=response.status_code,
            )

        return FeeBreakdown.model_validate(response.json())


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and "error" in body:
        return str(body["error"])
    return response.text
