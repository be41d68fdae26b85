# quotes/api/urls.py

from django.urls import path

from quotes.api.views import QuoteActionView, QuoteListCreateView

urlpatterns = [
    path("", QuoteListCreateView.as_view(), name="quotes"),
    path("<int:quote_id>/<str:action>/", QuoteActionView.as_view(), name="quote-action"),
]
