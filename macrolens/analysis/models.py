from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Transform(str, Enum):
    RAW = "raw"
    PCT = "pct"


class Trend(str, Enum):
    STRENGTHENING = "Strengthening"
    WEAKENING = "Weakening"
    STABLE = "Stable"


class Pillar(str, Enum):
    RATES = "Rates"
    INFLATION = "Inflation"
    GROWTH = "Growth"
    RISK = "Risk"


class Regime(str, Enum):
    RISK_ON = "RISK_ON"
    DEFENSIVE = "DEFENSIVE"
    CRISIS = "CRISIS"
    NEUTRAL = "NEUTRAL"


class SignalStatus(str, Enum):
    DOMINANT = "DOMINANT"
    ACTIVE = "ACTIVE"
    DORMANT = "DORMANT"
    CONTRADICTED = "CONTRADICTED"


class DataPoint(BaseModel):
    date: str
    value: float


class AlignedPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: str
    x: float
    y: float


class CorrelationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    correlation: float
    trend: Trend
    series: list[AlignedPoint]
    description: str
    pillar: Pillar


class RegimePoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: str
    liquidity_score: float
    stress_score: float
    regime: Regime


class CorrelationPayload(BaseModel):
    success: bool = True
    correlations: list[CorrelationResult]
    # Only the most recent points are sent to the frontend
    regime_matrix: list[RegimePoint]


class CorrelationSummary(BaseModel):
    """Reduced view of a correlation handed to the narrative service."""

    id: str
    name: str
    correlation: float
    trend: Trend = Trend.STABLE
    pillar: Pillar


class Insight(BaseModel):
    signal_status: SignalStatus
    relationship_state: str
    dominant_driver: str
    market_consequence: str
    invalidation: str
    confidence_context: str


class NarrativeContent(BaseModel):
    """Shape the LLM is asked to return. Decoded strictly."""

    model_config = ConfigDict(extra="forbid")

    insights: dict[str, Insight]
    summary_pro: str
    summary_simple: str


class NarrativeOk(BaseModel):
    status: Literal["ok"] = "ok"
    summary_pro: str
    summary_simple: str
    insights: dict[str, Insight]


class NarrativeUnavailable(BaseModel):
    status: Literal["unavailable"] = "unavailable"
    summary_pro: str = "AI Configuration missing. Please check API Key."
    summary_simple: str = "AI is offline."
    insights: dict[str, Insight] = Field(default_factory=dict)


class NarrativeMalformed(BaseModel):
    status: Literal["malformed"] = "malformed"
    summary_pro: str = "The AI response could not be read."
    summary_simple: str = "Error reading insight."
    insights: dict[str, Insight] = Field(default_factory=dict)
    raw: str


class NarrativeError(BaseModel):
    status: Literal["error"] = "error"
    summary_pro: str
    summary_simple: str = "Error generating insight."
    insights: dict[str, Insight] = Field(default_factory=dict)


NarrativeResult = NarrativeOk | NarrativeUnavailable | NarrativeMalformed | NarrativeError
