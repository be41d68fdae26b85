# assets/api/urls.py

from django.urls import path

from assets.api.views import (
    AssetCategoryListCreateView,
    CalculateDepreciationView,
    DepreciationRecordListView,
    FixedAssetListCreateView,
    RevaluationActionView,
    RevaluationListCreateView,
    ToggleDepreciationReversalView,
)

urlpatterns = [
    path("categories/", AssetCategoryListCreateView.as_view(), name="asset-categories"),
    path("", FixedAssetListCreateView.as_view(), name="fixed-assets"),
    path("depreciation/", DepreciationRecordListView.as_view(), name="depreciation-records"),
    path("depreciation/calculate/", CalculateDepreciationView.as_view(), name="depreciation-calculate"),
    path(
        "depreciation/<int:record_id>/toggle/",
        ToggleDepreciationReversalView.as_view(),
        name="depreciation-toggle",
    ),
    path("revaluations/", RevaluationListCreateView.as_view(), name="revaluations"),
    path(
        "revaluations/<int:record_id>/<str:action>/",
        RevaluationActionView.as_view(),
        name="revaluation-action",
    ),
]
