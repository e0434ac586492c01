"""
agency/urls/report_urls.py
namespace = "reports"
"""
from django.urls import path

from ..views.report_views import (
    AgencyExpiryReportView,
    CommissionsReportView,
    EconomicReportView,
    PortfolioDossierView,
    ScoutingDossierView,
)

app_name = "reports"

urlpatterns = [
    path("economic/",      EconomicReportView.as_view(),     name="economic"),
    path("commissions/",   CommissionsReportView.as_view(),  name="commissions"),
    path("agency-expiry/", AgencyExpiryReportView.as_view(), name="agency-expiry"),
    path("portfolio/",     PortfolioDossierView.as_view(),   name="portfolio"),
    path("scouting/",      ScoutingDossierView.as_view(),    name="scouting"),
]
