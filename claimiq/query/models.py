"""
Data models for the query interpretation module.
"""

import math
from dataclasses import dataclass
from typing import Dict, Any, Optional

CLAIM_CATEGORY = "insurance-claim"
GENDERS = ("male", "female")


def normalize_gender(value: str) -> str:
    """Map any male/female spelling or initial onto the enum value."""
    return "male" if value.strip().lower().startswith("m") else "female"


@dataclass(frozen=True)
class StructuredQuery:
    """Attributes extracted from a free-text claim description."""
    category: str = CLAIM_CATEGORY
    age: Optional[int] = None
    gender: Optional[str] = None
    procedure: Optional[str] = None
    location: Optional[str] = None
    policy_duration: Optional[str] = None
    amount: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON shape with only the fields that were found."""
        data = {
            "age": self.age,
            "gender": self.gender,
            "procedure": self.procedure,
            "location": self.location,
            "policyDuration": self.policy_duration,
            "amount": self.amount,
        }
        result = {key: value for key, value in data.items() if value is not None}
        result["category"] = self.category
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StructuredQuery":
        """
        Build a StructuredQuery from the JSON shape returned by the model.

        Raises:
            ValueError: A present field has an unusable type or value
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected an object, got {type(data).__name__}")

        age = _optional_number(data.get("age"), "age")
        if age is not None:
            if age != int(age):
                raise ValueError(f"age must be a whole number, got {age}")
            age = int(age) if age > 0 else None

        gender = _optional_text(data.get("gender"))
        if gender is not None:
            if gender.lower()[0] not in ("m", "f"):
                raise ValueError(f"Unknown gender: {gender}")
            gender = normalize_gender(gender)

        amount = _optional_number(data.get("amount"), "amount")

        return cls(
            category=_optional_text(data.get("category")) or CLAIM_CATEGORY,
            age=age,
            gender=gender,
            procedure=_optional_text(data.get("procedure")),
            location=_optional_text(data.get("location")),
            policy_duration=_optional_text(data.get("policyDuration")),
            amount=amount if amount and amount > 0 else None
        )


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    return value.strip() or None


def _optional_number(value: Any, name: str) -> Optional[float]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be a number, got {value!r}") from e
    if not math.isfinite(number):
        raise ValueError(f"{name} must be finite, got {value!r}")
    return number
