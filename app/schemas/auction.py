import math
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.core.enums import VehicleType


class FeeConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    storage_fee: float = Field(100.0, ge=0)
    base_fee_percentage: float = Field(0.10, ge=0)

    common_base_fee_min: float = Field(10.0, ge=0)
    common_base_fee_max: float = Field(50.0, ge=0)

    luxury_base_fee_min: float = Field(25.0, ge=0)
    luxury_base_fee_max: float = Field(200.0, ge=0)

    common_special_fee_percentage: float = Field(0.02, ge=0)
    luxury_special_fee_percentage: float = Field(0.04, ge=0)

    @model_validator(mode="after")
    def check_clamp_bounds(self):
        if self.common_base_fee_min > self.common_base_fee_max:
            raise ValueError("common_base_fee_min must not exceed common_base_fee_max")
        if self.luxury_base_fee_min > self.luxury_base_fee_max:
            raise ValueError("luxury_base_fee_min must not exceed luxury_base_fee_max")
        return self


class CalculateRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    vehicle_price: float
    vehicle_type: VehicleType

    @field_validator("vehicle_price", mode="before")
    @classmethod
    def check_price_is_number(cls, value: Any) -> Any:
        # JSON numbers only; lax float parsing would take true or "398"
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("Vehicle price must be a number")
        return value

    @field_validator("vehicle_price")
    @classmethod
    def check_price(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("Vehicle price must be a finite number")
        if value <= 0:
            raise ValueError("Vehicle price must be greater than zero")
        return value

    @field_validator("vehicle_type", mode="before")
    @classmethod
    def check_vehicle_type(cls, value: Any) -> VehicleType:
        if value is None:
            raise ValueError("Vehicle type is required")
        try:
            return VehicleType(value)
        except ValueError:
            raise ValueError(f"Unknown vehicle type: {value}")


class FeeBreakdown(BaseModel):
    """Itemized auction fees for one vehicle, serialized in camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    base_fee: float
    special_fee: float
    association_fee: int
    storage_fee: float
    total_fees: float
    grand_total: float


class HealthOut(BaseModel):
    status: str
    timestamp: datetime


class ErrorOut(BaseModel):
    error: str
