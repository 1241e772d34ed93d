# api/v1/urls.py
from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView

from api.v1.views.index import api_root
from api.v1.views.system_views import system_health, system_metrics
from apps.appointmentsapp.views import AppointmentViewSet
from apps.authapp.views import AuthViewSet, UserViewSet
from apps.customersapp.views import CustomerCategoryViewSet, CustomerViewSet
from apps.dashboardapp.views import DashboardViewSet
from apps.devicesapp.views import (
    BrandViewSet,
    DeviceModelViewSet,
    DeviceTypeViewSet,
    DeviceViewSet,
    PredefinedProblemViewSet,
    ServiceTypeViewSet,
)
from apps.inventoryapp.views import InventoryItemViewSet
from apps.locationsapp.views import LocationViewSet
from apps.notificationsapp.views import (
    NotificationTemplateViewSet,
    NotificationTypeViewSet,
    NotificationViewSet,
)
from apps.reportanalyticsapp.views import AnalyticsViewSet
from apps.salesapp.views import SaleViewSet
from apps.smsapp.views import (
    RecipientGroupViewSet,
    SmsCampaignViewSet,
    SmsQueueViewSet,
    SmsTemplateViewSet,
)

# Create a router for v1 API endpoints
router = DefaultRouter()

# Nested prefixes go before their parent so "types" is not taken for a pk
router.register(r"auth", AuthViewSet, basename="auth")
router.register(r"users", UserViewSet, basename="user")
router.register(r"locations", LocationViewSet, basename="location")
router.register(r"customers", CustomerViewSet, basename="customer")
router.register(r"customer-categories", CustomerCategoryViewSet, basename="customer-category")
router.register(r"devices", DeviceViewSet, basename="device")
router.register(r"catalogue/device-types", DeviceTypeViewSet, basename="device-type")
router.register(r"catalogue/brands", BrandViewSet, basename="brand")
router.register(r"catalogue/models", DeviceModelViewSet, basename="device-model")
router.register(r"catalogue/service-types", ServiceTypeViewSet, basename="service-type")
router.register(r"catalogue/problems", PredefinedProblemViewSet, basename="predefined-problem")
router.register(r"inventory", InventoryItemViewSet, basename="inventory")
router.register(r"sales", SaleViewSet, basename="sale")
router.register(r"appointments", AppointmentViewSet, basename="appointment")
router.register(r"notifications/types", NotificationTypeViewSet, basename="notification-type")
router.register(r"notifications/templates", NotificationTemplateViewSet, basename="notification-template")
router.register(r"notifications", NotificationViewSet, basename="notification")
router.register(r"sms/templates", SmsTemplateViewSet, basename="sms-template")
router.register(r"sms/queue", SmsQueueViewSet, basename="sms-queue")
router.register(r"sms/groups", RecipientGroupViewSet, basename="sms-group")
router.register(r"sms/campaigns", SmsCampaignViewSet, basename="sms-campaign")
router.register(r"analytics", AnalyticsViewSet, basename="analytics")
router.register(r"dashboard", DashboardViewSet, basename="dashboard")

# API URLs
urlpatterns = [
    # API root view
    path("", api_root, name="api-root"),
    path("auth/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("system/health/", system_health, name="system-health"),
    path("system/metrics/", system_metrics, name="system-metrics"),
    # App-specific URLs outside the router
    path("public/", include("apps.devicesapp.urls")),
    path("sms/", include("apps.smsapp.urls")),
    # Include router URLs
    path("", include(router.urls)),
]
