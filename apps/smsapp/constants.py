"""
Built-in SMS texts per language.

Templates use ``{placeholder}`` markers filled by TemplateService.render.
"""

from django.utils.translation import gettext_lazy as _

LANGUAGE_AMHARIC = "amharic"
LANGUAGE_ENGLISH = "english"
LANGUAGE_MIXED = "mixed"

LANGUAGE_CHOICES = (
    (LANGUAGE_AMHARIC, _("Amharic")),
    (LANGUAGE_ENGLISH, _("English")),
    (LANGUAGE_MIXED, _("Mixed")),
)
LANGUAGES = tuple(value for value, _label in LANGUAGE_CHOICES)

KIND_REGISTRATION = "device_registration"
KIND_STATUS_UPDATE = "device_status_update"
KIND_READY_FOR_PICKUP = "device_ready_for_pickup"
TEMPLATE_KINDS = (KIND_REGISTRATION, KIND_STATUS_UPDATE, KIND_READY_FOR_PICKUP)

# SmsQueue.message_type for each template kind
KIND_MESSAGE_TYPES = {
    KIND_REGISTRATION: "device_registration",
    KIND_STATUS_UPDATE: "status_update",
    KIND_READY_FOR_PICKUP: "ready_for_pickup",
}

PLACEHOLDERS = (
    "customerName",
    "customerPhone",
    "deviceType",
    "brand",
    "model",
    "problemDescription",
    "receiptNumber",
    "status",
    "statusMessage",
    "totalCost",
    "costInfo",
    "estimatedCompletionDate",
    "completionInfo",
)

DEFAULT_TEMPLATES = {
    LANGUAGE_AMHARIC: {
        KIND_REGISTRATION: """🔧 መሣሪያ ምዝገባ የተረጋገጠ ነው

ውድ {customerName}፣

የእርስዎ መሣሪያ ለጥገና አገልግሎት በተሳካተ ሁኔታ ተመዝግቧል።

📱 የመሣሪያ ዝርዝር፦
• አይነት፦ {deviceType}
• የምርት ስም፦ {brand}
• ሞዴል፦ {model}
• ችግር፦ {problemDescription}

🔢 የመከታተል ቁጥር፦ {receiptNumber}

የጥገና ሂደቱን እንደቀጥለን እንወቃለን። የመከታተል ቁጥሩን በመጠቀም የመሣሪያዎን ሁኔታ መከታተል ይችላሉ።

አገልግሎታችንን ስለመረጡ እናመሰግናለን!""",
        KIND_STATUS_UPDATE: """📱 የመሣሪያ ሁኔታ ዝመና

ውድ {customerName}፣

{statusMessage}

🔢 የመከታተል ቁጥር፦ {receiptNumber}
📱 መሣሪያ፦ {deviceType} {brand} {model}{costInfo}{completionInfo}

እባክዎ ትዕግስት ያድርጉ!""",
        KIND_READY_FOR_PICKUP: """🎉 መሣሪያ ለመውሰድ ዝግጁ ነው!

ውድ {customerName}፣

የእርስዎ መሣሪያ ጥገና ተጠናቅቋል እና ለመውሰድ ዝግጁ ነው!

📱 መሣሪያ፦ {deviceType} {brand} {model}
🔢 የመከታተል ቁጥር፦ {receiptNumber}{costInfo}

እባክዎ መሣሪያዎን ሲወስዱ የመከታተል ቁጥሩን ያመጡ።

እርስዎን እንድናይ እንጠብቃለን!""",
    },
    LANGUAGE_ENGLISH: {
        KIND_REGISTRATION: """🔧 Device Registration Confirmed

Dear {customerName},

Your device has been successfully registered for repair service.

📱 Device Details:
• Type: {deviceType}
• Brand: {brand}
• Model: {model}
• Issue: {problemDescription}

🔢 Tracking Number: {receiptNumber}

We will continue with the repair process. You can track your device status using the tracking number.

Thank you for choosing our service!""",
        KIND_STATUS_UPDATE: """📱 Device Status Update

Dear {customerName},

{statusMessage}

🔢 Tracking Number: {receiptNumber}
📱 Device: {deviceType} {brand} {model}{costInfo}{completionInfo}

Please be patient!""",
        KIND_READY_FOR_PICKUP: """🎉 Device Ready for Pickup!

Dear {customerName},

Your device repair has been completed and is ready for pickup!

📱 Device: {deviceType} {brand} {model}
🔢 Tracking Number: {receiptNumber}{costInfo}

Please bring the tracking number when you come to collect your device.

We look forward to seeing you!""",
    },
    LANGUAGE_MIXED: {
        KIND_REGISTRATION: """🔧 Device Registration የተረጋገጠ ነው

Dear {customerName} / ውድ {customerName}፣

Your device has been successfully registered for repair service.
የእርስዎ መሣሪያ ለጥገና አገልግሎት በተሳካተ ሁኔታ ተመዝግቧል።

📱 Device Details / የመሣሪያ ዝርዝር፦
• Type/አይነት: {deviceType}
• Brand/የምርት ስም: {brand}
• Model/ሞዴል: {model}
• Issue/ችግር: {problemDescription}

🔢 Tracking Number / የመከታተል ቁጥር: {receiptNumber}

Thank you for choosing our service! / አገልግሎታችንን ስለመረጡ እናመሰግናለን!""",
        KIND_STATUS_UPDATE: """📱 Device Status Update / የመሣሪያ ሁኔታ ዝመና

Dear {customerName} / ውድ {customerName}፣

{statusMessage}

🔢 Tracking Number / የመከታተል ቁጥር: {receiptNumber}
📱 Device / መሣሪያ: {deviceType} {brand} {model}{costInfo}{completionInfo}

Please be patient! / እባክዎ ትዕግስት ያድርጉ!""",
        KIND_READY_FOR_PICKUP: """🎉 Device Ready for Pickup! / መሣሪያ ለመውሰድ ዝግጁ ነው!

Dear {customerName} / ውድ {customerName}፣

Your device repair has been completed and is ready for pickup!
የእርስዎ መሣሪያ ጥገና ተጠናቅቋል እና ለመውሰድ ዝግጁ ነው!

📱 Device / መሣሪያ: {deviceType} {brand} {model}
🔢 Tracking Number / የመከታተል ቁጥር: {receiptNumber}{costInfo}

Please bring the tracking number when you come to collect your device.
እባክዎ መሣሪያዎን ሲወስዱ የመከታተል ቁጥሩን ያመጡ።

We look forward to seeing you! / እርስዎን እንድናይ እንጠብቃለን!""",
    },
}

STATUS_MESSAGES = {
    LANGUAGE_AMHARIC: {
        "diagnosed": "🔍 የእርስዎ መሣሪያ ተሰምሯል እና የጥገና እቅዱን እያዘጋጅን ነው።",
        "in_progress": "⚙️ በእርስዎ መሣሪያ ላይ እያሰራን ነው።",
        "waiting_parts": "📦 የጥገና ክፍሎች እስኪመጡ ድረስ እያጠበን ነው።",
        "completed": "✅ የእርስዎ መሣሪያ ጥገና በተሳካተ ሁኔታ ተጠናቅቋል!",
        "ready_for_pickup": "🎉 የእርስዎ መሣሪያ ለመውሰድ ዝግጁ ነው! እባክዎ እንድትመጡ እንጠይቃለን።",
        "delivered": "📱 የእርስዎ መሣሪያ ተላክቷል። አገልግሎታችንን ስለመረጡ እናመሰግናለን!",
        "cancelled": "❌ የእርስዎ መሣሪያ ጥገና ተሰርዟል። ለተጨማሪ መረጃ እባክዎ ያግኙን።",
    },
    LANGUAGE_ENGLISH: {
        "diagnosed": "🔍 Your device has been diagnosed and we're preparing the repair plan.",
        "in_progress": "⚙️ We're now working on your device repair.",
        "waiting_parts": "📦 We're waiting for parts to arrive to complete your repair.",
        "completed": "✅ Your device repair has been completed successfully!",
        "ready_for_pickup": "🎉 Your device is ready for pickup! Please visit us to collect it.",
        "delivered": "📱 Your device has been delivered. Thank you for choosing our service!",
        "cancelled": "❌ Your device repair has been cancelled. Please contact us for more information.",
    },
}

GENERIC_STATUS_MESSAGES = {
    LANGUAGE_AMHARIC: "የመሣሪያዎ ሁኔታ ተዘምኗል።",
    LANGUAGE_ENGLISH: "Your device status has been updated.",
}

COST_INFO = {
    LANGUAGE_AMHARIC: "\n💰 አጠቃላይ ወጪ፦ {totalCost} ብር",
    LANGUAGE_ENGLISH: "\n💰 Total Cost: {totalCost} ETB",
    LANGUAGE_MIXED: "\n💰 Total Cost / አጠቃላይ ወጪ: {totalCost} ETB",
}

COMPLETION_INFO = {
    LANGUAGE_AMHARIC: "\n📅 የተገመተ የመጨረሻ ቀን፦ {date}",
    LANGUAGE_ENGLISH: "\n📅 Estimated Completion: {date}",
    LANGUAGE_MIXED: "\n📅 Estimated Completion / የተገመተ የመጨረሻ ቀን: {date}",
}

QUEUE_MESSAGE_TYPE_CHOICES = (
    ("device_registration", _("Device Registration")),
    ("status_update", _("Status Update")),
    ("ready_for_pickup", _("Ready for Pickup")),
    ("campaign", _("Campaign")),
    ("manual", _("Manual")),
)

QUEUE_PENDING = "pending"
QUEUE_SENT = "sent"
QUEUE_DELIVERED = "delivered"
QUEUE_FAILED = "failed"
QUEUE_CANCELLED = "cancelled"

QUEUE_STATUS_CHOICES = (
    (QUEUE_PENDING, _("Pending")),
    (QUEUE_SENT, _("Sent")),
    (QUEUE_DELIVERED, _("Delivered")),
    (QUEUE_FAILED, _("Failed")),
    (QUEUE_CANCELLED, _("Cancelled")),
)

PROVIDER_CHOICES = (
    ("africas_talking", _("Africa's Talking")),
    ("bulksms", _("BulkSMS")),
    ("ethio_telecom", _("Ethio Telecom")),
    ("local_aggregator", _("Local Aggregator")),
    ("custom", _("Custom")),
)

CAMPAIGN_TARGET_CHOICES = (
    ("all", _("All Customers")),
    ("category", _("Customer Category")),
    ("recipient_group", _("Recipient Group")),
    ("custom", _("Custom Filters")),
)

CAMPAIGN_DRAFT = "draft"
CAMPAIGN_SCHEDULED = "scheduled"
CAMPAIGN_SENDING = "sending"
CAMPAIGN_SENT = "sent"
CAMPAIGN_FAILED = "failed"
CAMPAIGN_CANCELLED = "cancelled"

CAMPAIGN_STATUS_CHOICES = (
    (CAMPAIGN_DRAFT, _("Draft")),
    (CAMPAIGN_SCHEDULED, _("Scheduled")),
    (CAMPAIGN_SENDING, _("Sending")),
    (CAMPAIGN_SENT, _("Sent")),
    (CAMPAIGN_FAILED, _("Failed")),
    (CAMPAIGN_CANCELLED, _("Cancelled")),
)

# Campaigns in these states can still be edited
CAMPAIGN_EDITABLE_STATUSES = (CAMPAIGN_DRAFT, CAMPAIGN_SCHEDULED)
