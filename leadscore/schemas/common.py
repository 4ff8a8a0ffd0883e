from enum import Enum
from pydantic import BaseModel


class RuleCategory(str, Enum):
    demographic = "demographic"
    behavioral = "behavioral"
    negative = "negative"


class IntentLevel(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"


class MomentumLevel(str, Enum):
    none = "none"
    low = "low"
    medium = "medium"
    high = "high"


class ScoreTier(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"


class Classification(str, Enum):
    hot = "hot"
    warm = "warm"
    qualified = "qualified"
    cold = "cold"


class SuccessResponse(BaseModel):
    """Generic success response base."""

    success: bool = True
