from unittest.mock import patch

from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APISimpleTestCase

from analysis.models import Insight, NarrativeError, NarrativeOk, SignalStatus

BODY = {
    "correlations": [
        {
            "id": "VIX_HY",
            "name": "VIX vs HY Spreads",
            "correlation": 0.71,
            "trend": "Strengthening",
            "pillar": "Risk",
        }
    ],
    "regime": {
        "date": "2024-05-31",
        "liquidity_score": 0.2,
        "stress_score": 1.3,
        "regime": "NEUTRAL",
    },
}


class CorrelationInsightViewTests(APISimpleTestCase):
    def setUp(self):
        self.url = reverse("correlations-insight")

    @patch("analysis.views.generate_narrative")
    def test_success(self, mock_generate_narrative):
        mock_generate_narrative.return_value = NarrativeOk(
            summary_pro="Credit confirms equity stress.",
            summary_simple="Stocks and credit are nervous together.",
            insights={
                "VIX vs HY Spreads": Insight(
                    signal_status=SignalStatus.DOMINANT,
                    relationship_state="Strengthening",
                    dominant_driver="Credit",
                    market_consequence="Wider spreads",
                    invalidation="A RISK_ON regime",
                    confidence_context="High",
                )
            },
        )

        response = self.client.post(self.url, BODY, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertEqual(body["status"], "ok")
        self.assertEqual(body["insights"]["VIX vs HY Spreads"]["signal_status"], "DOMINANT")

        request_body = mock_generate_narrative.call_args.args[0]
        self.assertEqual(request_body.correlations[0].id, "VIX_HY")
        self.assertEqual(request_body.regime.stress_score, 1.3)

    @override_settings(OPENAI_API_KEY=None)
    def test_unavailable_is_not_an_error(self):
        response = self.client.post(self.url, BODY, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertEqual(body["summary_pro"], "AI Configuration missing. Please check API Key.")
        self.assertEqual(body["summary_simple"], "AI is offline.")
        self.assertEqual(body["insights"], {})

    @patch(
        "analysis.views.generate_narrative",
        return_value=NarrativeError(summary_pro="Failed to generate analysis. Error: Unknown"),
    )
    def test_upstream_error(self, _):
        response = self.client.post(self.url, BODY, format="json")

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.json()["summary_simple"], "Error generating insight.")

    @patch("analysis.views.generate_narrative")
    def test_regime_is_optional(self, mock_generate_narrative):
        mock_generate_narrative.return_value = NarrativeError(summary_pro="x")
        body = {"correlations": BODY["correlations"]}

        self.client.post(self.url, body, format="json")

        self.assertIsNone(mock_generate_narrative.call_args.args[0].regime)

    @patch("analysis.views.generate_narrative")
    def test_full_correlation_results_are_reduced(self, mock_generate_narrative):
        mock_generate_narrative.return_value = NarrativeError(summary_pro="x")
        correlation = dict(
            BODY["correlations"][0],
            description="Equity vs Credit Fear",
            series=[{"date": "2024-05-31", "x": 14.2, "y": 3.1}],
        )
        body = {"correlations": [correlation], "regime": BODY["regime"]}

        self.client.post(self.url, body, format="json")

        summary = mock_generate_narrative.call_args.args[0].correlations[0]
        self.assertEqual(
            summary.model_dump(mode="json"),
            {
                "id": "VIX_HY",
                "name": "VIX vs HY Spreads",
                "correlation": 0.71,
                "trend": "Strengthening",
                "pillar": "Risk",
            },
        )

    @patch("analysis.views.generate_narrative")
    def test_invalid_body(self, mock_generate_narrative):
        response = self.client.post(self.url, {"correlations": "nope"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        mock_generate_narrative.assert_not_called()
