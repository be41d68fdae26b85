# quotes/api/views.py

from django.core.exceptions import ValidationError as DjangoValidationError
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.errors import service_error_response
from accounting.services.exceptions import AccountingServiceError
from quotes.api.serializers import ConvertQuoteSerializer, QuoteSerializer
from quotes.models import Quote
from quotes.services import quote_service


def _forbidden(message):
    return Response({"detail": message}, status=status.HTTP_403_FORBIDDEN)


def _not_found(message):
    return Response({"detail": message}, status=status.HTTP_404_NOT_FOUND)


class QuoteListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = QuoteSerializer

    @extend_schema(
        tags=["quotes"],
        parameters=[OpenApiParameter(name="status", type=str, required=False)],
        responses=QuoteSerializer(many=True),
    )
    def get(self, request):
        if not request.user.has_perm("quotes.view_quote"):
            return _forbidden("You do not have permission to view quotes.")

        qs = Quote.objects.order_by("-issue_date", "-created_at")
        status_filter = request.query_params.get("status")
        if status_filter:
            qs = qs.filter(status=status_filter)
        return Response(QuoteSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["quotes"], request=QuoteSerializer, responses={201: QuoteSerializer})
    def post(self, request):
        if not request.user.has_perm("quotes.add_quote"):
            return _forbidden("You do not have permission to create quotes.")

        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        try:
            quote = s.save()
        except DjangoValidationError as exc:
            return Response({"detail": exc.messages}, status=status.HTTP_400_BAD_REQUEST)
        return Response(QuoteSerializer(quote).data, status=status.HTTP_201_CREATED)


class QuoteActionView(GenericAPIView):
    """
    POST /quotes/<id>/<action>/
    action ∈ submit | approve | reject | expire | convert
    """

    permission_classes = [IsAuthenticated]
    serializer_class = ConvertQuoteSerializer

    ACTIONS = {
        "submit": quote_service.submit_for_review,
        "approve": quote_service.approve,
        "reject": quote_service.reject,
        "expire": quote_service.expire,
    }

    @extend_schema(tags=["quotes"], request=ConvertQuoteSerializer, responses={200: QuoteSerializer})
    def post(self, request, quote_id: int, action: str):
        if not request.user.has_perm("quotes.change_quote"):
            return _forbidden("You do not have permission to change quotes.")

        if action != "convert" and action not in self.ACTIONS:
            return _not_found(f"Unknown action '{action}'")

        quote = Quote.objects.filter(pk=quote_id).first()
        if quote is None:
            return _not_found("Quote not found")

        try:
            if action == "convert":
                s = self.get_serializer(data=request.data)
                s.is_valid(raise_exception=True)
                quote = quote_service.convert_to_invoice(
                    quote, invoice_number=s.validated_data.get("invoice_number")
                )
            else:
                quote = self.ACTIONS[action](quote)
        except AccountingServiceError as exc:
            return service_error_response(exc)

        return Response(QuoteSerializer(quote).data, status=status.HTTP_200_OK)
