import math
from typing import Any, List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ============================================================================#
# Coercion helpers (service responses are untrusted)
# ============================================================================#


def coerce_text(value: Any) -> str:
    """Return value as a string, '' for None/containers"""
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value)


def coerce_text_list(value: Any) -> List[str]:
    """Accept a list, a single string or None"""
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None and not isinstance(item, (dict, list))]
    return []


def coerce_number(value: Any) -> float:
    """Return a finite float or 0"""
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(str(value).strip().rstrip("%")) if isinstance(value, str) else float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


class NexusModel(BaseModel):
    """Base model: camelCase on the wire, snake_case in Python"""
    model_config = ConfigDict(populate_by_name=True)


# ============================================================================#
# AI results
# ============================================================================#


class DiagnosisResult(NexusModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    disease: str = ""
    confidence: float = 0.0
    description: str = ""
    symptoms: List[str] = Field(default_factory=list)
    treatment: List[str] = Field(default_factory=list)
    prevention: List[str] = Field(default_factory=list)
    climate_impact: str = Field("", alias="climateImpact")
    sustainability_score: float = Field(0.0, alias="sustainabilityScore")

    @field_validator("disease", "description", "climate_impact", mode="before")
    @classmethod
    def _text(cls, v):
        return coerce_text(v)

    @field_validator("symptoms", "treatment", "prevention", mode="before")
    @classmethod
    def _text_list(cls, v):
        return coerce_text_list(v)

    @field_validator("confidence", mode="before")
    @classmethod
    def _confidence(cls, v):
        # Models sometimes answer in percent
        number = coerce_number(v)
        if 1.0 < number <= 100.0:
            number = number / 100.0
        return min(1.0, max(0.0, number))

    @field_validator("sustainability_score", mode="before")
    @classmethod
    def _score(cls, v):
        return coerce_number(v)


class ImpactMetrics(NexusModel):
    water_saved: str = Field("", alias="waterSaved")
    chemical_reduction: str = Field("", alias="chemicalReduction")
    yield_boost: str = Field("", alias="yieldBoost")

    @field_validator("water_saved", "chemical_reduction", "yield_boost", mode="before")
    @classmethod
    def _text(cls, v):
        return coerce_text(v)


class FarmerIdentity(NexusModel):
    name: str = ""
    nexus_score: float = Field(0.0, alias="nexusScore")
    verified_location: str = Field("", alias="verifiedLocation")
    cv_domain: str = Field("", alias="cvDomain")
    impact_metrics: ImpactMetrics = Field(default_factory=ImpactMetrics, alias="impactMetrics")

    @field_validator("name", "verified_location", "cv_domain", mode="before")
    @classmethod
    def _text(cls, v):
        return coerce_text(v)

    @field_validator("nexus_score", mode="before")
    @classmethod
    def _score(cls, v):
        return coerce_number(v)

    @field_validator("impact_metrics", mode="before")
    @classmethod
    def _metrics(cls, v):
        return v if isinstance(v, (dict, ImpactMetrics)) else {}


# ============================================================================#
# Conversation / agent status
# ============================================================================#


class ChatMessage(NexusModel):
    role: Literal["user", "model"]
    text: str = ""


class AgentState(NexusModel):
    is_thinking: bool = Field(False, alias="isThinking")
    active_tools: List[str] = Field(
        default_factory=lambda: ["Vision_Core", "Market_Stream"], alias="activeTools"
    )
    current_task: str = Field("Awaiting User Intent", alias="currentTask")


# ============================================================================#
# Persisted user data
# ============================================================================#


class PriceAlert(NexusModel):
    id: str
    crop: str
    target_price: float = Field(..., alias="targetPrice")
    condition: Literal["above", "below"] = "above"
    active: bool = True


class FarmSettings(NexusModel):
    altitude: int = 1450
    location: str = "Lumle, Kaski"
    primary_crops: List[str] = Field(
        default_factory=lambda: ["Rice", "Organic Potato"], alias="primaryCrops"
    )
    language: Literal["en", "ne"] = "en"
    farm_size: float = Field(8, alias="farmSize")
    soil_type: str = Field("Loamy", alias="soilType")
    email: str = ""


class MarketTrend(NexusModel):
    name: str
    price: float
    prediction: float
    sentiment: Literal["Bullish", "Bearish", "Stable"] = "Stable"


# ============================================================================#
# Request bodies
# ============================================================================#


class ChatRequest(BaseModel):
    message: str


class SpeakRequest(BaseModel):
    text: str


class AlertRequest(NexusModel):
    target_price: float = Field(..., gt=0, alias="targetPrice")
    condition: Literal["above", "below"] = "above"


class MarketRequest(BaseModel):
    trends: List[MarketTrend] = Field(default_factory=list)
