from django.urls import path

from apps.smsapp.views import SendSmsView, SmsSettingsTestView, SmsSettingsView

urlpatterns = [
    path("settings/", SmsSettingsView.as_view(), name="sms-settings"),
    path("settings/test/", SmsSettingsTestView.as_view(), name="sms-settings-test"),
    path("send/", SendSmsView.as_view(), name="sms-send"),
]
