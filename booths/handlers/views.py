"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Let domain errors propagate to handlers.exceptions for mapping
- Never contain business logic
- Never expose internal error details
"""

from django.core.cache import cache
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from booths.cache import stats_cache_key
from booths.conf import get_setting
from booths.domain import BoothId
from booths.domain.errors import SessionNotFoundError
from booths.domain.models import OperationFilter
from booths.handlers.serializers import (
    BoothCodeSerializer,
    BoothOperationSerializer,
    CodeAssignmentSerializer,
    CodeExpirySerializer,
    OperationFilterSerializer,
    OperationHistorySerializer,
    OperationStatsSerializer,
    OperationSummarySerializer,
    QuickStartSessionSerializer,
    SessionStartSerializer,
    SessionViewSerializer,
    StartSessionSerializer,
)
from booths.services.access_service import BoothAccessService
from booths.services.admin_service import BoothAdminService, parse_booth_id
from booths.services.operations import build_operator_info
from booths.stores.django_store import DjangoBoothStore, DjangoParticipantCounter


def access_service() -> BoothAccessService:
    return BoothAccessService.build(DjangoBoothStore(), DjangoParticipantCounter())


def admin_service() -> BoothAdminService:
    return BoothAdminService.build(DjangoBoothStore(), DjangoParticipantCounter())


def bearer_token(request: Request) -> str:
    """Extract the session token from ``Authorization: Bearer <token>``."""
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise SessionNotFoundError()
    return token.strip()


class OperatorView(APIView):
    """Base for operator endpoints. Operators authenticate by session token only."""

    authentication_classes = []
    permission_classes = [AllowAny]


class StartSessionView(OperatorView):
    """Handler for POST /api/operator/sessions"""

    def post(self, request: Request) -> Response:
        serializer = StartSessionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        operator = build_operator_info(**data["operator"])

        started = access_service().start_session(
            code=data["code"],
            operator=operator,
            address=request.META.get("REMOTE_ADDR"),
            user_agent=request.headers.get("User-Agent"),
        )
        return Response(SessionStartSerializer(started).data, status=status.HTTP_201_CREATED)


class QuickStartSessionView(OperatorView):
    """Handler for POST /api/operator/sessions/quick"""

    def post(self, request: Request) -> Response:
        serializer = QuickStartSessionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        started = access_service().quick_start_session(
            code=serializer.validated_data["code"],
            address=request.META.get("REMOTE_ADDR"),
            user_agent=request.headers.get("User-Agent"),
        )
        return Response(SessionStartSerializer(started).data, status=status.HTTP_201_CREATED)


class CurrentSessionView(OperatorView):
    """Handler for GET/DELETE /api/operator/session"""

    def get(self, request: Request) -> Response:
        view = access_service().get_current_session(bearer_token(request))
        return Response(SessionViewSerializer(view).data)

    def delete(self, request: Request) -> Response:
        summary = access_service().end_session(bearer_token(request))
        return Response(OperationSummarySerializer(summary).data)


class RefreshSessionView(OperatorView):
    """Handler for POST /api/operator/session/refresh"""

    def post(self, request: Request) -> Response:
        refreshed = access_service().refresh_session(bearer_token(request))
        return Response({"refreshed": refreshed})


class BoothCodeListView(APIView):
    """Handler for GET /api/admin/booths/codes"""

    permission_classes = [IsAdminUser]

    def get(self, request: Request) -> Response:
        booths = admin_service().list_booth_codes()
        return Response(BoothCodeSerializer(booths, many=True).data)


class AssignCodeView(APIView):
    """Handler for POST /api/admin/booths/{booth_id}/code"""

    permission_classes = [IsAdminUser]
    regenerate = False

    def post(self, request: Request, booth_id: str) -> Response:
        serializer = CodeExpirySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        expiry_days = serializer.validated_data.get("expiry_days")

        service = admin_service()
        if self.regenerate:
            assignment = service.regenerate_code(booth_id, expiry_days)
        else:
            assignment = service.assign_code(booth_id, expiry_days)
        return Response(CodeAssignmentSerializer(assignment).data, status=status.HTTP_201_CREATED)


class RegenerateCodeView(AssignCodeView):
    """Handler for POST /api/admin/booths/{booth_id}/code/regenerate"""

    regenerate = True


class ActiveOperatorListView(APIView):
    """Handler for GET /api/admin/booths/{booth_id}/operators"""

    permission_classes = [IsAdminUser]

    def get(self, request: Request, booth_id: str) -> Response:
        operations = admin_service().list_active_operators(booth_id)
        return Response(BoothOperationSerializer(operations, many=True).data)


class OperationStatsView(APIView):
    """Handler for GET /api/admin/stats

    Cached per booth; signals drop the entry whenever an operation changes.
    """

    permission_classes = [IsAdminUser]

    def get(self, request: Request) -> Response:
        raw = request.query_params.get("booth_id") or None
        # key on the canonical form so signal invalidation finds the entry
        booth_id = str(parse_booth_id(raw)) if raw else None
        key = stats_cache_key(booth_id)
        cached = cache.get(key)
        if cached is not None:
            return Response(cached)

        stats = admin_service().get_operation_stats(booth_id)
        data = OperationStatsSerializer(stats).data
        cache.set(key, data, timeout=get_setting("STATS_CACHE_SECONDS"))
        return Response(data)


class OperationHistoryView(APIView):
    """Handler for GET /api/admin/operations"""

    permission_classes = [IsAdminUser]

    def get(self, request: Request) -> Response:
        serializer = OperationFilterSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        criteria = OperationFilter(
            booth_id=BoothId(data["booth_id"]) if data.get("booth_id") else None,
            operator_name=data.get("operator_name"),
            started_from=data.get("started_from"),
            started_to=data.get("started_to"),
            is_active=data.get("is_active"),
        )
        entries = admin_service().operation_history(criteria)
        return Response(OperationHistorySerializer(entries, many=True).data)
