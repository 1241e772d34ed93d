"""
SMS app views
Templates, gateway settings, the outgoing queue, recipient groups and bulk
campaigns. Everything here except reading templates needs an admin or manager.
"""

from django.db.models import Count
from rest_framework import mixins, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from api.documentation.decorators import document_api_endpoint
from apps.authapp.permissions import IsAdminOrManager, IsManagerOrReadOnly
from apps.customersapp.serializers import CustomerSimpleSerializer
from apps.locationsapp.mixins import LocationScopedMixin
from apps.smsapp.models import EthiopianSmsSettings, RecipientGroup, SmsCampaign, SmsQueue
from apps.smsapp.serializers import (
    EthiopianSmsSettingsSerializer,
    GroupCustomersSerializer,
    RecipientGroupSerializer,
    RetrySerializer,
    ScheduleCampaignSerializer,
    SendSmsSerializer,
    SmsCampaignRecipientSerializer,
    SmsCampaignSerializer,
    SmsQueueSerializer,
    SmsTemplateSerializer,
    TemplatePreviewSerializer,
    TestSmsSerializer,
)
from apps.smsapp.services.campaign_service import CampaignService
from apps.smsapp.services.recipient_group_service import RecipientGroupService
from apps.smsapp.services.sms_service import SmsService
from apps.smsapp.services.template_service import TemplateService
from utils.exceptions import ExternalServiceError


class SmsTemplateViewSet(viewsets.ViewSet):
    """
    SMS templates, one per language (amharic, english, mixed)

    - GET /api/v1/sms/templates/ - All languages
    - GET/PUT /api/v1/sms/templates/{language}/ - One language
    - POST /api/v1/sms/templates/{language}/reset/ - Restore the built-in texts
    - POST /api/v1/sms/templates/preview/ - Render a template with sample data
    """

    permission_classes = [IsManagerOrReadOnly]
    lookup_field = "language"
    lookup_value_regex = "[a-z]+"

    def list(self, request):
        return Response(TemplateService.get_all_templates())

    def retrieve(self, request, language=None):
        return Response(TemplateService.get_template(language))

    @document_api_endpoint(summary="Update SMS template", request_body=SmsTemplateSerializer, tags=["SMS"])
    def update(self, request, language=None):
        serializer = SmsTemplateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response(TemplateService.update_template(language, serializer.validated_data))

    @document_api_endpoint(summary="Reset SMS template", tags=["SMS"])
    @action(detail=True, methods=["post"])
    def reset(self, request, language=None):
        return Response(TemplateService.reset_to_default(language))

    @document_api_endpoint(summary="Preview SMS template", request_body=TemplatePreviewSerializer, tags=["SMS"])
    @action(detail=False, methods=["post"], permission_classes=[permissions.IsAuthenticated])
    def preview(self, request):
        serializer = TemplatePreviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        language = data.get("language") or TemplateService.default_language()
        text = data.get("text") or TemplateService.get_template(language)[data["kind"]]
        message = TemplateService.preview(text, language, data.get("context"))
        return Response({"message": message, "length": len(message)})


class SmsSettingsView(APIView):
    """
    Ethiopian SMS gateway settings

    - GET /api/v1/sms/settings/
    - PUT /api/v1/sms/settings/
    """

    permission_classes = [IsAdminOrManager]

    def get(self, request):
        return Response(EthiopianSmsSettingsSerializer(EthiopianSmsSettings.load()).data)

    @document_api_endpoint(summary="Save SMS settings", request_body=EthiopianSmsSettingsSerializer, tags=["SMS"])
    def put(self, request):
        serializer = EthiopianSmsSettingsSerializer(
            EthiopianSmsSettings.load(), data=request.data, partial=True
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)


class SmsSettingsTestView(APIView):
    """POST /api/v1/sms/settings/test/ - Send a test SMS right away"""

    permission_classes = [IsAdminOrManager]

    @document_api_endpoint(summary="Send test SMS", request_body=TestSmsSerializer, tags=["SMS"])
    def post(self, request):
        serializer = TestSmsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = SmsService.send_test_message(
            serializer.validated_data["phone_number"], serializer.validated_data.get("message")
        )
        if not result["success"]:
            raise ExternalServiceError("Test SMS could not be sent", detail=result["error"])
        return Response(result)


class SendSmsView(APIView):
    """POST /api/v1/sms/send/ - Queue a single message"""

    permission_classes = [IsAdminOrManager]

    @document_api_endpoint(
        summary="Send an SMS",
        request_body=SendSmsSerializer,
        responses={202: SmsQueueSerializer, 400: "Bad Request"},
        tags=["SMS"],
    )
    def post(self, request):
        serializer = SendSmsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        entry = SmsService.queue_sms(
            serializer.validated_data["phone_number"],
            serializer.validated_data["message"],
            message_type="manual",
            metadata={"sent_by": str(request.user.pk)},
        )
        return Response(SmsQueueSerializer(entry).data, status=status.HTTP_202_ACCEPTED)


class SmsQueueViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Outgoing SMS queue

    - GET /api/v1/sms/queue/ - Queue entries (filter by status, message_type)
    - GET /api/v1/sms/queue/stats/ - Counts per status
    - POST /api/v1/sms/queue/process/ - Send the next batch now
    - POST /api/v1/sms/queue/retry/ - Re-queue failed messages
    - POST /api/v1/sms/queue/{id}/cancel/ - Cancel a pending message
    """

    queryset = SmsQueue.objects.all()
    serializer_class = SmsQueueSerializer
    permission_classes = [IsAdminOrManager]
    filterset_fields = ["status", "message_type"]
    search_fields = ["phone_number"]

    @action(detail=False, methods=["get"])
    def stats(self, request):
        return Response(SmsService.get_queue_stats())

    @document_api_endpoint(summary="Process SMS queue", tags=["SMS"])
    @action(detail=False, methods=["post"])
    def process(self, request):
        return Response(SmsService.process_queue())

    @document_api_endpoint(summary="Retry failed SMS", request_body=RetrySerializer, tags=["SMS"])
    @action(detail=False, methods=["post"])
    def retry(self, request):
        serializer = RetrySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        count = SmsService.retry_failed(serializer.validated_data.get("ids"))
        return Response({"retried": count})

    @document_api_endpoint(summary="Cancel SMS", tags=["SMS"])
    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        return Response(SmsQueueSerializer(SmsService.cancel(pk)).data)


class RecipientGroupViewSet(LocationScopedMixin, viewsets.ModelViewSet):
    """
    Hand-picked customer lists for campaigns

    - GET /api/v1/sms/groups/{id}/customers/ - Members
    - POST /api/v1/sms/groups/{id}/add-customers/ - {"customer_ids": [...]}
    - POST /api/v1/sms/groups/{id}/remove-customers/ - {"customer_ids": [...]}
    """

    serializer_class = RecipientGroupSerializer
    permission_classes = [IsManagerOrReadOnly]
    search_fields = ["name"]
    filterset_fields = ["is_active"]

    def get_queryset(self):
        return RecipientGroup.objects.annotate(member_count=Count("members"))

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)

    @action(detail=True, methods=["get"])
    def customers(self, request, pk=None):
        group = self.get_object()
        queryset = RecipientGroupService.customers(group, self.get_service_location_id())
        return Response(CustomerSimpleSerializer(queryset, many=True).data)

    @document_api_endpoint(summary="Add customers to group", request_body=GroupCustomersSerializer, tags=["SMS"])
    @action(detail=True, methods=["post"], url_path="add-customers")
    def add_customers(self, request, pk=None):
        group = self.get_object()
        serializer = GroupCustomersSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        added = RecipientGroupService.add_customers(group, serializer.validated_data["customer_ids"])
        return Response({"added": added, "member_count": group.members.count()})

    @document_api_endpoint(
        summary="Remove customers from group", request_body=GroupCustomersSerializer, tags=["SMS"]
    )
    @action(detail=True, methods=["post"], url_path="remove-customers")
    def remove_customers(self, request, pk=None):
        group = self.get_object()
        serializer = GroupCustomersSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        removed = RecipientGroupService.remove_customers(
            group, serializer.validated_data["customer_ids"]
        )
        return Response({"removed": removed, "member_count": group.members.count()})


class SmsCampaignViewSet(LocationScopedMixin, viewsets.ModelViewSet):
    """
    Bulk SMS campaigns

    - POST /api/v1/sms/campaigns/{id}/send/ - Queue the campaign now
    - POST /api/v1/sms/campaigns/{id}/schedule/ - {"scheduled_date": ...}
    - POST /api/v1/sms/campaigns/{id}/cancel/ - Cancel a draft or scheduled campaign
    - GET /api/v1/sms/campaigns/{id}/recipients/ - Per-recipient delivery status

    Campaigns can only be edited while draft or scheduled.
    """

    queryset = SmsCampaign.objects.select_related("category", "recipient_group")
    serializer_class = SmsCampaignSerializer
    permission_classes = [IsAdminOrManager]
    filterset_fields = ["status", "target_group"]
    search_fields = ["name", "occasion"]
    ordering_fields = ["created_at", "scheduled_date", "sent_at"]

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)

    def perform_update(self, serializer):
        CampaignService.ensure_editable(serializer.instance)
        serializer.save()

    @document_api_endpoint(summary="Send campaign", tags=["SMS"], location_scoped=True)
    @action(detail=True, methods=["post"])
    def send(self, request, pk=None):
        campaign = CampaignService.send_campaign(self.get_object(), self.get_service_location_id())
        return Response(self.get_serializer(campaign).data)

    @document_api_endpoint(summary="Schedule campaign", request_body=ScheduleCampaignSerializer, tags=["SMS"])
    @action(detail=True, methods=["post"])
    def schedule(self, request, pk=None):
        serializer = ScheduleCampaignSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        campaign = CampaignService.schedule(self.get_object(), serializer.validated_data["scheduled_date"])
        return Response(self.get_serializer(campaign).data)

    @document_api_endpoint(summary="Cancel campaign", tags=["SMS"])
    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        campaign = CampaignService.cancel(self.get_object())
        return Response(self.get_serializer(campaign).data)

    @action(detail=True, methods=["get"])
    def recipients(self, request, pk=None):
        campaign = self.get_object()
        queryset = campaign.recipients.select_related("customer").order_by("phone_number")
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(SmsCampaignRecipientSerializer(page, many=True).data)
        return Response(SmsCampaignRecipientSerializer(queryset, many=True).data)
