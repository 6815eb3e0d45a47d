from django.urls import path

from .views import CreateOrderView, PaymentConfigView, VerifyAndSaveView, VerifyPaymentView

# /api/payments/...
urlpatterns = [
    path("create-order", CreateOrderView.as_view(), name="create-order"),
    path("verify-and-save", VerifyAndSaveView.as_view(), name="verify-and-save"),
    path("verify", VerifyPaymentView.as_view(), name="verify-payment"),
    path("config", PaymentConfigView.as_view(), name="payments-config"),
]
