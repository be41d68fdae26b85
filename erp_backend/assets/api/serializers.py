# assets/api/serializers.py

from rest_framework import serializers

from assets.models import AssetCategory, DepreciationRecord, FixedAsset, RevaluationRecord


class AssetCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = AssetCategory
        fields = "__all__"
        read_only_fields = ("id", "created_at")


class FixedAssetSerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(source="category.name", read_only=True)

    class Meta:
        model = FixedAsset
        fields = "__all__"
        # balances are owned by the depreciation / revaluation services
        read_only_fields = ("id", "accumulated_depreciation", "current_value", "created_at", "updated_at")


class DepreciationRecordSerializer(serializers.ModelSerializer):
    asset_code = serializers.CharField(source="asset.code", read_only=True)
    asset_name = serializers.CharField(source="asset.name", read_only=True)
    entry_number = serializers.CharField(source="journal_entry.entry_number", read_only=True, default=None)

    class Meta:
        model = DepreciationRecord
        fields = (
            "id",
            "asset",
            "asset_code",
            "asset_name",
            "period",
            "depreciation_date",
            "monthly_amount",
            "accumulated_depreciation",
            "remaining_value",
            "status",
            "entry_number",
            "created_at",
        )
        read_only_fields = fields


class CalculateDepreciationSerializer(serializers.Serializer):
    as_of_date = serializers.DateField()


class RevaluationRecordSerializer(serializers.ModelSerializer):
    asset_code = serializers.CharField(source="asset.code", read_only=True)
    entry_number = serializers.CharField(source="journal_entry.entry_number", read_only=True, default=None)

    class Meta:
        model = RevaluationRecord
        fields = (
            "id",
            "asset",
            "asset_code",
            "revaluation_date",
            "previous_value",
            "new_value",
            "delta",
            "reason",
            "method",
            "appraiser",
            "notes",
            "status",
            "approved_by",
            "approved_at",
            "entry_number",
            "created_at",
        )
        read_only_fields = fields


class RevaluationCreateSerializer(serializers.Serializer):
    asset_id = serializers.IntegerField()
    new_value = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=0)
    revaluation_date = serializers.DateField(required=False)
    reason = serializers.CharField()
    method = serializers.CharField()
    appraiser = serializers.CharField(required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")
