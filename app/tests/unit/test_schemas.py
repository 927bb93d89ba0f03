import pytest
from pydantic import ValidationError

from app.core.config import Settings
from app.core.enums import VehicleType
from app.schemas.auction import CalculateRequest, FeeBreakdown, FeeConfig


class TestVehicleType:

    @pytest.mark.parametrize("raw,expected", [
        ("Common", VehicleType.COMMON),
        ("Luxury", VehicleType.LUXURY),
        ("luxury", VehicleType.LUXURY),
        (" COMMON ", VehicleType.COMMON),
        (0, VehicleType.COMMON),
        (1, VehicleType.LUXURY),
    ])
    def test_wire_encodings(self, raw, expected):
        assert VehicleType(raw) is expected

    @pytest.mark.parametrize("raw", ["Truck", "", 2, -1, True, 1.5])
    def test_unknown_values(self, raw):
        with pytest.raises(ValueError):
            VehicleType(raw)

    def test_str(self):
        assert str(VehicleType.LUXURY) == "Luxury"


class TestFeeConfig:

    def test_defaults(self):
        config = FeeConfig()
        assert config.storage_fee == 100
        assert config.base_fee_percentage == 0.10
        assert (config.common_base_fee_min, config.common_base_fee_max) == (10, 50)
        assert (config.luxury_base_fee_min, config.luxury_base_fee_max) == (25, 200)
        assert config.common_special_fee_percentage == 0.02
        assert config.luxury_special_fee_percentage == 0.04

    def test_immutable(self):
        config = FeeConfig()
        with pytest.raises(ValidationError):
            config.storage_fee = 5

    def test_min_above_max_rejected(self):
        with pytest.raises(ValidationError, match="common_base_fee_min"):
            FeeConfig(common_base_fee_min=60, common_base_fee_max=50)
        with pytest.raises(ValidationError, match="luxury_base_fee_min"):
            FeeConfig(luxury_base_fee_min=300)

    def test_negative_values_rejected(self):
        with pytest.raises(ValidationError):
            FeeConfig(storage_fee=-1)

    def test_settings_build_fee_config(self, monkeypatch):
        monkeypatch.setenv("STORAGE_FEE", "80")
        monkeypatch.setenv("LUXURY_SPECIAL_FEE_PERCENTAGE", "0.05")
        settings = Settings(_env_file=None)

        config = settings.fee_config
        assert config.storage_fee == 80
        assert config.luxury_special_fee_percentage == 0.05
        assert config.common_base_fee_max == 50

    def test_settings_invalid_fee_config(self, monkeypatch):
        monkeypatch.setenv("COMMON_BASE_FEE_MIN", "500")
        settings = Settings(_env_file=None)
        with pytest.raises(ValidationError):
            settings.fee_config


class TestCalculateRequest:

    def test_camel_case_body(self):
        req = CalculateRequest.model_validate({"vehiclePrice": 398, "vehicleType": "Common"})
        assert req.vehicle_price == 398.0
        assert req.vehicle_type is VehicleType.COMMON

    def test_ordinal_vehicle_type(self):
        req = CalculateRequest.model_validate({"vehiclePrice": 10, "vehicleType": 1})
        assert req.vehicle_type is VehicleType.LUXURY

    @pytest.mark.parametrize("price", [0, -5])
    def test_non_positive_price(self, price):
        with pytest.raises(ValidationError, match="Vehicle price must be greater than zero"):
            CalculateRequest.model_validate({"vehiclePrice": price, "vehicleType": "Common"})

    @pytest.mark.parametrize("price", [True, "398", None])
    def test_price_must_be_a_number(self, price):
        with pytest.raises(ValidationError, match="Vehicle price must be a number"):
            CalculateRequest.model_validate({"vehiclePrice": price, "vehicleType": "Common"})

    def test_unknown_vehicle_type(self):
        with pytest.raises(ValidationError, match="Unknown vehicle type: Truck"):
            CalculateRequest.model_validate({"vehiclePrice": 10, "vehicleType": "Truck"})

    def test_missing_fields(self):
        with pytest.raises(ValidationError) as exc_info:
            CalculateRequest.model_validate({})
        assert {e["type"] for e in exc_info.value.errors()} == {"missing"}


class TestFeeBreakdown:

    def test_serializes_camel_case(self):
        breakdown = FeeBreakdown(
            base_fee=39.8,
            special_fee=7.96,
            association_fee=5,
            storage_fee=100,
            total_fees=152.76,
            grand_total=550.76,
        )
        assert breakdown.model_dump(by_alias=True) == {
            "baseFee": 39.8,
            "specialFee": 7.96,
            "associationFee": 5,
            "storageFee": 100.0,
            "totalFees": 152.76,
            "grandTotal": 550.76,
        }
