# quotes/api/serializers.py

from rest_framework import serializers

from quotes.models import Quote


class QuoteSerializer(serializers.ModelSerializer):
    class Meta:
        model = Quote
        fields = (
            "id",
            "number",
            "customer_name",
            "issue_date",
            "valid_until",
            "currency",
            "subtotal",
            "tax",
            "total",
            "notes",
            "status",
            "invoice_number",
            "converted_at",
            "created_at",
        )
        # total is derived; status / invoice move through quote_service
        read_only_fields = ("id", "total", "status", "invoice_number", "converted_at", "created_at")


class ConvertQuoteSerializer(serializers.Serializer):
    invoice_number = serializers.CharField(max_length=40, required=False, allow_blank=True)
