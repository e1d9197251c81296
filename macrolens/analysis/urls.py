from django.urls import path
from . import views

urlpatterns = [
    path(
        "analysis/correlations",
        views.CorrelationsView.as_view(),
        name="correlations",
    ),
    path(
        "analysis/correlations/",
        views.CorrelationsView.as_view(),
        name="correlations",
    ),
    path(
        "analysis/correlations/insight",
        views.CorrelationInsightView.as_view(),
        name="correlations-insight",
    ),
    path(
        "analysis/correlations/insight/",
        views.CorrelationInsightView.as_view(),
        name="correlations-insight",
    ),
    path("market/history", views.MarketHistoryView.as_view(), name="market-history"),
    path("market/history/", views.MarketHistoryView.as_view(), name="market-history"),
]
