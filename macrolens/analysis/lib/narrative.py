import logging

import openai
from django.conf import settings
from pydantic import ValidationError

from adapters.openai import OpenAIAdapter
from analysis.models import (
    NarrativeContent,
    NarrativeError,
    NarrativeMalformed,
    NarrativeOk,
    NarrativeResult,
    NarrativeUnavailable,
)
from analysis.serializers import NarrativeRequestBody

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """
You are a senior global macro strategist writing institutional-grade market notes.
Write a "Daily Macro Call" with high conviction.

For every correlation you get the two indicators, the current correlation (R),
whether it is strengthening or weakening against the prior window (Trend) and
the current macro regime.

Rules:
1. If a trend is "Stable", explain why (for example, already priced in).
2. Every invalidation must reference the macro regime.
3. Use conviction language such as "confirms", "reinforces", "fails to support".
   Do not use "suggests".
4. For every insight say whether the relationship is strengthening, weakening
   or persistently dominant.

Current regime: {regime_text}

Correlations:
{correlation_text}

Respond with a single JSON object with exactly these keys:
{{
    "insights": {{
        "<correlation name>": {{
            "signal_status": "DOMINANT" | "ACTIVE" | "DORMANT" | "CONTRADICTED",
            "relationship_state": "...",
            "dominant_driver": "...",
            "market_consequence": "...",
            "invalidation": "...",
            "confidence_context": "..."
        }}
    }},
    "summary_pro": "Institutional summary naming the binding constraints.",
    "summary_simple": "Plain-language version, at most 3 sentences, no jargon."
}}

Signal status:
- DOMINANT: high correlation (>0.7), strengthening or persistent, driving the regime.
- ACTIVE: moderate correlation, aligned with the regime.
- DORMANT: low correlation or flat trend.
- CONTRADICTED: correlation exists but opposes the broader regime logic.
"""


def build_prompt(body: NarrativeRequestBody) -> str:
    regime_label = body.regime.regime.value if body.regime else "UNKNOWN"
    if body.regime is None:
        regime_text = "No regime data available"
    else:
        regime_text = (
            f"Global Liquidity Score: {body.regime.liquidity_score:.2f}, "
            f"India Stress Score: {body.regime.stress_score:.2f} "
            f"(Regime: {regime_label})"
        )

    correlation_text = "\n".join(
        f"---\nCorrelation Name: {c.name}\n"
        f"Pillar: {c.pillar.value}\n"
        f"Correlation Value (R): {c.correlation:.2f}\n"
        f"Correlation Trend: {c.trend.value}\n"
        f"Macro Regime: {regime_label}"
        for c in body.correlations
    )

    return PROMPT_TEMPLATE.format(
        regime_text=regime_text, correlation_text=correlation_text
    )


def decode_narrative(raw: str | None) -> NarrativeOk | NarrativeMalformed:
    if raw is None:
        return NarrativeMalformed(raw="")

    try:
        content = NarrativeContent.model_validate_json(raw)
    except ValidationError as e:
        logger.warning("Malformed narrative response: %s", e)
        return NarrativeMalformed(raw=raw)

    return NarrativeOk(
        summary_pro=content.summary_pro,
        summary_simple=content.summary_simple,
        insights=content.insights,
    )


def generate_narrative(
    body: NarrativeRequestBody, adapter: OpenAIAdapter | None = None
) -> NarrativeResult:
    if adapter is None:
        if not settings.OPENAI_API_KEY:
            return NarrativeUnavailable()
        adapter = OpenAIAdapter()

    try:
        raw = adapter.generate_insight(build_prompt(body))
    except openai.OpenAIError as e:
        logger.exception("Correlation insight error")
        return NarrativeError(
            summary_pro=f"Failed to generate analysis. Error: {str(e) or 'Unknown'}"
        )

    return decode_narrative(raw)
