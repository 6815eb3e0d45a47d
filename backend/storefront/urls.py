from django.urls import path

from .views import (
    CertificateDownloadView,
    PlanListView,
    WizardCheckoutView,
    WizardCompleteView,
    WizardDetailsView,
    WizardPlanView,
    WizardView,
)

# /api/...
urlpatterns = [
    path("plans", PlanListView.as_view(), name="plans"),
    path("wizard", WizardView.as_view(), name="wizard"),
    path("wizard/plan", WizardPlanView.as_view(), name="wizard-plan"),
    path("wizard/details", WizardDetailsView.as_view(), name="wizard-details"),
    path("wizard/checkout", WizardCheckoutView.as_view(), name="wizard-checkout"),
    path("wizard/complete", WizardCompleteView.as_view(), name="wizard-complete"),
    path("certificate", CertificateDownloadView.as_view(), name="certificate-download"),
]
