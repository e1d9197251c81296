import logging
from datetime import date, timedelta

from django.conf import settings
from django.http import HttpResponse, JsonResponse
from pydantic import ValidationError
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.views import APIView

from analysis.lib.correlations import generate_correlations
from analysis.lib.fetch import MarketDataClient, resolve_symbol
from analysis.lib.narrative import generate_narrative
from analysis.models import NarrativeError
from analysis.serializers import HistoryRequestBody, NarrativeRequestBody
from core.data_processing import to_frame, to_points

logger = logging.getLogger(__name__)


class CorrelationsView(APIView):
    permission_classes = (AllowAny,)

    def post(self, _: Request) -> HttpResponse:
        try:
            with MarketDataClient() as client:
                payload = generate_correlations(client)
        except Exception:
            logger.exception("Correlation analysis failed")
            return JsonResponse({"error": "Failed"}, status=500)

        return JsonResponse(payload.model_dump(mode="json"))


class CorrelationInsightView(APIView):
    permission_classes = (AllowAny,)

    def post(self, request: Request) -> HttpResponse:
        try:
            body = NarrativeRequestBody.model_validate(request.data)
        except ValidationError as e:
            logger.info("Invalid insight request: %s", e)
            return JsonResponse({"error": "Invalid request body"}, status=400)

        result = generate_narrative(body)
        status = 500 if isinstance(result, NarrativeError) else 200
        return JsonResponse(result.model_dump(mode="json"), status=status)


class MarketHistoryView(APIView):
    permission_classes = (AllowAny,)

    def post(self, request: Request) -> HttpResponse:
        try:
            body = HistoryRequestBody.model_validate(request.data)
        except ValidationError:
            return JsonResponse({"error": "Invalid symbols array"}, status=400)

        requests = {}
        for symbol in body.symbols:
            series_request = resolve_symbol(symbol)
            if series_request is None:
                logger.info("Unknown symbol %s", symbol)
                continue
            requests[symbol] = series_request

        # FRED would otherwise send every observation since the series began
        observation_start = date.today() - timedelta(
            days=settings.MARKET_HISTORY_LOOKBACK_DAYS
        )
        with MarketDataClient() as client:
            bundle = client.fetch_bundle(requests, observation_start=observation_start)

        data = {}
        for symbol, points in bundle.items():
            if not points:
                continue
            data[symbol] = [
                p.model_dump() for p in to_points(to_frame(points))
            ]

        return JsonResponse({"success": True, "data": data})
