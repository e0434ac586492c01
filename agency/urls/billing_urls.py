"""
agency/urls/billing_urls.py
namespace = "billing"
"""
from django.urls import path

from ..views.billing_views import AdministrationView, PaymentUpdateView

app_name = "billing"

urlpatterns = [
    path("",
         AdministrationView.as_view(),  name="administration"),
    path("<str:player_id>/years/<str:year_id>/payment/",
         PaymentUpdateView.as_view(),   name="payment-update"),
]
