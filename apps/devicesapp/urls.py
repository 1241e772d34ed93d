from django.urls import path

from apps.devicesapp.views import DeviceTrackingView, PublicFeedbackView

urlpatterns = [
    path("track/<str:receipt_number>/", DeviceTrackingView.as_view(), name="device-track"),
    path("feedback/", PublicFeedbackView.as_view(), name="public-device-feedback"),
]
