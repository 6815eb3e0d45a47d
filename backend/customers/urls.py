from rest_framework.routers import DefaultRouter
from .views import CustomerViewSet

# /api/customers/...
router = DefaultRouter(trailing_slash=False)
router.register(r"customers", CustomerViewSet, basename="customers")

urlpatterns = router.urls
