from enum import Enum


class VehicleType(str, Enum):
    COMMON = "Common"
    LUXURY = "Luxury"

    def __str__(self):
        return self.value

    @classmethod
    def _missing_(cls, value):
        # Accept any casing of the name and the ordinal wire encoding (0, 1).
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            members = list(cls)
            if 0 <= value < len(members):
                return members[value]
            return None
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        return None
