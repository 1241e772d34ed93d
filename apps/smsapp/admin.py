from django.contrib import admin

from apps.smsapp.models import (
    EthiopianSmsSettings,
    RecipientGroup,
    RecipientGroupMember,
    SmsCampaign,
    SmsCampaignRecipient,
    SmsQueue,
    SmsTemplate,
)


@admin.register(SmsTemplate)
class SmsTemplateAdmin(admin.ModelAdmin):
    list_display = ("language", "is_active", "updated_at")


@admin.register(EthiopianSmsSettings)
class EthiopianSmsSettingsAdmin(admin.ModelAdmin):
    list_display = ("provider", "sender_id", "updated_at")
    exclude = ("password", "api_key")


@admin.register(SmsQueue)
class SmsQueueAdmin(admin.ModelAdmin):
    list_display = ("phone_number", "message_type", "status", "attempts", "created_at", "sent_at")
    list_filter = ("status", "message_type")
    search_fields = ("phone_number",)


class RecipientGroupMemberInline(admin.TabularInline):
    model = RecipientGroupMember
    extra = 0
    raw_id_fields = ("customer",)


@admin.register(RecipientGroup)
class RecipientGroupAdmin(admin.ModelAdmin):
    list_display = ("name", "is_active", "created_at")
    inlines = [RecipientGroupMemberInline]


class SmsCampaignRecipientInline(admin.TabularInline):
    model = SmsCampaignRecipient
    extra = 0
    readonly_fields = ("customer", "phone_number", "status", "sent_at", "error_message")


@admin.register(SmsCampaign)
class SmsCampaignAdmin(admin.ModelAdmin):
    list_display = ("name", "target_group", "status", "total_count", "sent_count", "scheduled_date")
    list_filter = ("status", "target_group")
    inlines = [SmsCampaignRecipientInline]
