from django.urls import path

from booths.handlers import (
    ActiveOperatorListView,
    AssignCodeView,
    BoothCodeListView,
    CurrentSessionView,
    OperationHistoryView,
    OperationStatsView,
    QuickStartSessionView,
    RefreshSessionView,
    RegenerateCodeView,
    StartSessionView,
)

urlpatterns = [
    path("operator/sessions", StartSessionView.as_view(), name="operator-session-start"),
    path(
        "operator/sessions/quick",
        QuickStartSessionView.as_view(),
        name="operator-session-quick-start",
    ),
    path("operator/session", CurrentSessionView.as_view(), name="operator-session"),
    path(
        "operator/session/refresh",
        RefreshSessionView.as_view(),
        name="operator-session-refresh",
    ),
    path("admin/booths/codes", BoothCodeListView.as_view(), name="booth-code-list"),
    path("admin/booths/<str:booth_id>/code", AssignCodeView.as_view(), name="booth-code-assign"),
    path(
        "admin/booths/<str:booth_id>/code/regenerate",
        RegenerateCodeView.as_view(),
        name="booth-code-regenerate",
    ),
    path(
        "admin/booths/<str:booth_id>/operators",
        ActiveOperatorListView.as_view(),
        name="booth-active-operators",
    ),
    path("admin/stats", OperationStatsView.as_view(), name="operation-stats"),
    path("admin/operations", OperationHistoryView.as_view(), name="operation-history"),
]
