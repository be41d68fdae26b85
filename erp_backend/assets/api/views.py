# assets/api/views.py

"""
FIXED ASSET API

Reads go through assets.selectors; every mutation goes through the
depreciation / revaluation services (never direct ledger writes).
"""

from django.core.exceptions import ValidationError as DjangoValidationError
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.errors import service_error_response
from accounting.services.exceptions import AccountingServiceError
from assets import selectors
from assets.api.serializers import (
    AssetCategorySerializer,
    CalculateDepreciationSerializer,
    DepreciationRecordSerializer,
    FixedAssetSerializer,
    RevaluationCreateSerializer,
    RevaluationRecordSerializer,
)
from assets.models import AssetCategory, DepreciationRecord, FixedAsset, RevaluationRecord
from assets.services import depreciation_service, revaluation_service


def _forbidden(message):
    return Response({"detail": message}, status=status.HTTP_403_FORBIDDEN)


def _not_found(message):
    return Response({"detail": message}, status=status.HTTP_404_NOT_FOUND)


class AssetCategoryListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = AssetCategorySerializer

    @extend_schema(tags=["assets"], responses=AssetCategorySerializer(many=True))
    def get(self, request):
        qs = AssetCategory.objects.filter(is_active=True).order_by("name")
        return Response(AssetCategorySerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["assets"], request=AssetCategorySerializer, responses={201: AssetCategorySerializer})
    def post(self, request):
        if not request.user.has_perm("assets.add_assetcategory"):
            return _forbidden("You do not have permission to create asset categories.")

        s = AssetCategorySerializer(data=request.data)
        s.is_valid(raise_exception=True)
        try:
            category = s.save()
        except DjangoValidationError as exc:
            return Response({"detail": exc.messages}, status=status.HTTP_400_BAD_REQUEST)
        return Response(AssetCategorySerializer(category).data, status=status.HTTP_201_CREATED)


class FixedAssetListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = FixedAssetSerializer

    @extend_schema(tags=["assets"], responses=FixedAssetSerializer(many=True))
    def get(self, request):
        qs = FixedAsset.objects.select_related("category").order_by("code")
        return Response(FixedAssetSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["assets"], request=FixedAssetSerializer, responses={201: FixedAssetSerializer})
    def post(self, request):
        if not request.user.has_perm("assets.add_fixedasset"):
            return _forbidden("You do not have permission to register assets.")

        s = FixedAssetSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        try:
            asset = s.save()
        except DjangoValidationError as exc:
            return Response({"detail": exc.messages}, status=status.HTTP_400_BAD_REQUEST)
        return Response(FixedAssetSerializer(asset).data, status=status.HTTP_201_CREATED)


class DepreciationRecordListView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = DepreciationRecordSerializer

    @extend_schema(
        tags=["assets"],
        parameters=[
            OpenApiParameter(name="period", type=str, required=False, description="YYYY-MM"),
            OpenApiParameter(name="asset", type=int, required=False),
            OpenApiParameter(name="category", type=int, required=False),
            OpenApiParameter(name="status", type=str, required=False),
        ],
        responses=DepreciationRecordSerializer(many=True),
    )
    def get(self, request):
        if not request.user.has_perm("assets.view_depreciationrecord"):
            return _forbidden("You do not have permission to view depreciation records.")

        filters = {k: request.query_params.get(k) for k in ("period", "asset", "category", "status")}
        qs = selectors.list_depreciation_records(filters)
        return Response(DepreciationRecordSerializer(qs, many=True).data, status=status.HTTP_200_OK)


class CalculateDepreciationView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CalculateDepreciationSerializer

    @extend_schema(
        tags=["assets"],
        request=CalculateDepreciationSerializer,
        responses={201: DepreciationRecordSerializer(many=True), 400: dict, 403: dict},
    )
    def post(self, request):
        if not request.user.has_perm("assets.add_depreciationrecord"):
            return _forbidden("You do not have permission to run depreciation.")

        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            records = depreciation_service.calculate_monthly_depreciation(s.validated_data["as_of_date"])
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(DepreciationRecordSerializer(records, many=True).data, status=status.HTTP_201_CREATED)


class ToggleDepreciationReversalView(GenericAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["assets"], request=None, responses={200: DepreciationRecordSerializer})
    def post(self, request, record_id: int):
        if not request.user.has_perm("assets.change_depreciationrecord"):
            return _forbidden("You do not have permission to reverse depreciation.")

        record = DepreciationRecord.objects.filter(pk=record_id).first()
        if record is None:
            return _not_found("Depreciation record not found")

        try:
            record = depreciation_service.toggle_reversal(record)
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(DepreciationRecordSerializer(record).data, status=status.HTTP_200_OK)


class RevaluationListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = RevaluationCreateSerializer

    @extend_schema(
        tags=["assets"],
        parameters=[
            OpenApiParameter(name="asset", type=int, required=False),
            OpenApiParameter(name="status", type=str, required=False),
            OpenApiParameter(name="reason", type=str, required=False),
        ],
        responses=RevaluationRecordSerializer(many=True),
    )
    def get(self, request):
        if not request.user.has_perm("assets.view_revaluationrecord"):
            return _forbidden("You do not have permission to view revaluations.")

        filters = {k: request.query_params.get(k) for k in ("asset", "status", "reason")}
        qs = selectors.list_revaluation_records(filters)
        return Response(RevaluationRecordSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["assets"],
        request=RevaluationCreateSerializer,
        responses={201: RevaluationRecordSerializer},
    )
    def post(self, request):
        if not request.user.has_perm("assets.add_revaluationrecord"):
            return _forbidden("You do not have permission to create revaluations.")

        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = dict(s.validated_data)

        try:
            asset = selectors.get_asset(data.pop("asset_id"))
            record = revaluation_service.create_revaluation(asset=asset, **data)
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(RevaluationRecordSerializer(record).data, status=status.HTTP_201_CREATED)


class RevaluationActionView(GenericAPIView):
    """
    POST /revaluations/<id>/<action>/  action ∈ submit | approve | reject
    """

    permission_classes = [IsAuthenticated]

    ACTIONS = {
        "submit": "submit_for_review",
        "approve": "approve",
        "reject": "reject",
    }

    @extend_schema(tags=["assets"], request=None, responses={200: RevaluationRecordSerializer})
    def post(self, request, record_id: int, action: str):
        if not request.user.has_perm("assets.change_revaluationrecord"):
            return _forbidden("You do not have permission to change revaluations.")

        handler_name = self.ACTIONS.get(action)
        if handler_name is None:
            return _not_found(f"Unknown action '{action}'")

        record = RevaluationRecord.objects.filter(pk=record_id).first()
        if record is None:
            return _not_found("Revaluation not found")

        try:
            if handler_name == "approve":
                revaluation_service.approve(record, approved_by=request.user.get_username())
            else:
                getattr(revaluation_service, handler_name)(record)
        except AccountingServiceError as exc:
            return service_error_response(exc)

        record.refresh_from_db()
        return Response(RevaluationRecordSerializer(record).data, status=status.HTTP_200_OK)
