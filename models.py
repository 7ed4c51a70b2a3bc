import enum
from typing import Any

# Enums
class CollegeTypeEnum(str, enum.Enum):
    IT = "IT"
    MANAGEMENT = "Management"
    BOTH = "Both"

    @classmethod
    def coerce(cls, value: Any) -> "CollegeTypeEnum":
        """Map a model-supplied type string to an enum member, defaulting to BOTH."""
        if isinstance(value, str):
            cleaned = value.strip().lower()
            for member in cls:
                if member.value.lower() == cleaned:
                    return member
        return cls.BOTH
