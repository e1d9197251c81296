from pydantic import BaseModel

from .models import CorrelationSummary, RegimePoint


class NarrativeRequestBody(BaseModel):
    correlations: list[CorrelationSummary]
    regime: RegimePoint | None = None


class HistoryRequestBody(BaseModel):
    symbols: list[str]
