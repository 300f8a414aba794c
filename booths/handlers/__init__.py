from booths.handlers.views import (
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

__all__ = [
    "ActiveOperatorListView",
    "AssignCodeView",
    "BoothCodeListView",
    "CurrentSessionView",
    "OperationHistoryView",
    "OperationStatsView",
    "QuickStartSessionView",
    "RefreshSessionView",
    "RegenerateCodeView",
    "StartSessionView",
]
