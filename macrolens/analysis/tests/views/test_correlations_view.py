from unittest.mock import patch

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APISimpleTestCase

from analysis.models import (
    AlignedPoint,
    CorrelationPayload,
    CorrelationResult,
    Pillar,
    Regime,
    RegimePoint,
    Trend,
)

PAYLOAD = CorrelationPayload(
    correlations=[
        CorrelationResult(
            id="US10Y_DXY",
            name="US 10Y vs DXY",
            correlation=0.42,
            trend=Trend.STABLE,
            series=[AlignedPoint(date="2024-01-02", x=4.1, y=102.3)],
            description="Rates vs dollar",
            pillar=Pillar.RATES,
        )
    ],
    regime_matrix=[
        RegimePoint(
            date="2024-01-02", liquidity_score=-1.2, stress_score=-1.1, regime=Regime.RISK_ON
        )
    ],
)


@patch("analysis.views.MarketDataClient")
class CorrelationsViewTests(APISimpleTestCase):
    def setUp(self):
        self.url = reverse("correlations")

    @patch("analysis.views.generate_correlations", return_value=PAYLOAD)
    def test_success(self, mock_generate_correlations, mock_client):
        response = self.client.post(self.url, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["correlations"][0]["id"], "US10Y_DXY")
        self.assertEqual(body["correlations"][0]["trend"], "Stable")
        self.assertEqual(body["correlations"][0]["pillar"], "Rates")
        self.assertEqual(
            body["correlations"][0]["series"], [{"date": "2024-01-02", "x": 4.1, "y": 102.3}]
        )
        self.assertEqual(body["regime_matrix"][0]["regime"], "RISK_ON")
        mock_generate_correlations.assert_called_once_with(
            mock_client.return_value.__enter__.return_value
        )
        mock_client.return_value.__exit__.assert_called_once()

    @patch("analysis.views.generate_correlations", side_effect=RuntimeError("boom"))
    def test_failure(self, _, mock_client):
        response = self.client.post(self.url, format="json")

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.json(), {"error": "Failed"})
        mock_client.return_value.__exit__.assert_called_once()

    def test_get_not_allowed(self, _):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
