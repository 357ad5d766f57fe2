from django.core.files.storage import default_storage
from django.utils import timezone
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from api.health_checks import build_health_payload
from market import codes, lifecycle, storage
from market.locations import list_cities_by_province, list_provinces
from market.policy import Operation, Principal
from market.search import SearchScope, fetch_listing, listing_stats, paginate, parse_page_params, search_listings
from notifications.models import Notification

from .permissions import OperationPermission
from .serializers import (
    AdminListingSerializer,
    ListingQuerySerializer,
    ListingSerializer,
    LocationSerializer,
    NotificationSerializer,
    ProvinceSerializer,
    ReportCreateSerializer,
    ReportSerializer,
    StatusUpdateSerializer,
    UserMeSerializer,
)


def _principal(request):
    return Principal.from_user(request.user)


def _page_payload(page, serializer_class, request) -> dict:
    return {
        "results": serializer_class(page.items, many=True, context={"request": request}).data,
        "total": page.total,
        "page": page.page,
        "limit": page.limit,
        "total_pages": page.total_pages,
    }


def _search(request, scope, serializer_class):
    query = ListingQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)
    page = search_listings(
        _principal(request),
        scope,
        query.to_filters(),
        page=request.query_params.get("page"),
        limit=request.query_params.get("limit"),
    )
    return Response(_page_payload(page, serializer_class, request))


def _transition_payload(result, serializer_class=ListingSerializer) -> dict:
    return {"message": result.message, "listing": serializer_class(result.listing).data}


class HealthView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        payload, ok = build_health_payload()
        return Response(payload, status=status.HTTP_200_OK if ok else status.HTTP_503_SERVICE_UNAVAILABLE)


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(UserMeSerializer(request.user).data)

    def patch(self, request):
        serializer = UserMeSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)


class ProvinceViewSet(viewsets.ViewSet):
    permission_classes = [OperationPermission]
    lookup_field = "code"
    lookup_value_regex = r"[^/]+"
    operations = {"list": Operation.LIST_LOCATIONS, "cities": Operation.LIST_LOCATIONS}

    def list(self, request):
        return Response(ProvinceSerializer(list_provinces(), many=True).data)

    @action(detail=True, methods=["get"], url_path="cities")
    def cities(self, request, code=None):
        return Response(LocationSerializer(list_cities_by_province(code), many=True).data)


class ListingViewSet(viewsets.ViewSet):
    permission_classes = [OperationPermission]
    lookup_value_regex = r"\d+"
    throttle_scope = None
    operations = {
        "list": Operation.PUBLIC_SEARCH,
        "retrieve": Operation.FETCH,
        "create": Operation.CREATE,
        "partial_update": Operation.EDIT,
        "destroy": Operation.SOFT_DELETE,
        "toggle_status": Operation.TOGGLE_STATUS,
        "renew": Operation.RENEW,
        "report": Operation.REPORT,
        "mine": Operation.LIST_MINE,
        "upload": Operation.UPLOAD_PHOTOS,
    }

    def list(self, request):
        return _search(request, SearchScope.PUBLIC, ListingSerializer)

    def retrieve(self, request, pk=None):
        listing = fetch_listing(_principal(request), pk)
        return Response(ListingSerializer(listing).data)

    def create(self, request):
        listing = lifecycle.create(_principal(request), dict(request.data.items()))
        return Response(ListingSerializer(listing).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        fields = {key: request.data[key] for key in request.data if key != "removed_images"}
        removed = request.data.get("removed_images") or []
        if isinstance(removed, str):
            removed = [removed]
        listing = lifecycle.edit(_principal(request), pk, fields, removed_images=removed)
        return Response(ListingSerializer(listing).data)

    def destroy(self, request, pk=None):
        result = lifecycle.soft_delete(_principal(request), pk)
        return Response({"message": result.message, "id": result.listing.pk})

    @action(detail=True, methods=["post"], url_path="toggle-status")
    def toggle_status(self, request, pk=None):
        result = lifecycle.toggle_status(_principal(request), pk)
        return Response(_transition_payload(result))

    @action(detail=True, methods=["post"], url_path="renew")
    def renew(self, request, pk=None):
        result = lifecycle.renew(_principal(request), pk)
        return Response(_transition_payload(result))

    @action(
        detail=True,
        methods=["post"],
        url_path="report",
        throttle_classes=[ScopedRateThrottle],
        throttle_scope="report",
    )
    def report(self, request, pk=None):
        body = ReportCreateSerializer(data=request.data)
        body.is_valid(raise_exception=True)
        entry = lifecycle.report(
            pk,
            body.validated_data.get("reason"),
            additional_info=body.validated_data.get("additional_info"),
            contact_info=body.validated_data.get("contact_info"),
            principal=_principal(request),
        )
        return Response(
            {"message": codes.SUCCESS_REPORT_CREATED, "report": ReportSerializer(entry).data},
            status=status.HTTP_201_CREATED,
        )

    @action(detail=False, methods=["get"], url_path="mine")
    def mine(self, request):
        return _search(request, SearchScope.OWNER, ListingSerializer)

    @action(detail=False, methods=["post"], url_path="upload")
    def upload(self, request):
        references = storage.store(request.FILES.getlist("photos"))
        return Response(
            {"photos": references, "urls": [default_storage.url(ref) for ref in references]},
            status=status.HTTP_201_CREATED,
        )


class AdminListingViewSet(viewsets.ViewSet):
    permission_classes = [OperationPermission]
    lookup_value_regex = r"\d+"
    operations = {
        "list": Operation.ADMIN_SEARCH,
        "destroy": Operation.ADMIN_SOFT_DELETE,
        "approve": Operation.APPROVE,
        "set_status": Operation.UPDATE_STATUS,
        "stats": Operation.STATS,
    }

    def list(self, request):
        return _search(request, SearchScope.ADMIN, AdminListingSerializer)

    def destroy(self, request, pk=None):
        result = lifecycle.admin_soft_delete(_principal(request), pk)
        return Response({"message": result.message, "id": result.listing.pk})

    @action(detail=True, methods=["post"], url_path="approve")
    def approve(self, request, pk=None):
        result = lifecycle.approve(_principal(request), pk)
        return Response(_transition_payload(result, AdminListingSerializer))

    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request, pk=None):
        body = StatusUpdateSerializer(data=request.data)
        body.is_valid(raise_exception=True)
        result = lifecycle.update_status(_principal(request), pk, body.validated_data["status"])
        return Response(_transition_payload(result, AdminListingSerializer))

    @action(detail=False, methods=["get"], url_path="stats")
    def stats(self, request):
        return Response(listing_stats(_principal(request)))


class NotificationViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    def list(self, request):
        qs = Notification.objects.filter(user=request.user).order_by("-created_at", "-id")
        unread = str(request.query_params.get("unread") or "").lower() in {"1", "true", "yes"}
        if unread:
            qs = qs.filter(read_at__isnull=True)
        page_num, size = parse_page_params(request.query_params.get("page"), request.query_params.get("limit"))
        return Response(_page_payload(paginate(qs, page_num, size), NotificationSerializer, request))

    @action(detail=True, methods=["post"], url_path="read")
    def read(self, request, pk=None):
        notification = Notification.objects.filter(user=request.user, pk=pk).first()
        if notification is None:
            raise NotFound()
        if notification.read_at is None:
            notification.read_at = timezone.now()
            notification.save(update_fields=["read_at", "updated_at"])
        return Response(NotificationSerializer(notification).data)
