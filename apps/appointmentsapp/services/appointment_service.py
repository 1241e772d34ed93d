import logging
from datetime import timedelta

from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.appointmentsapp.models import Appointment
from apps.customersapp.services.customer_service import CustomerService
from utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

OPEN_STATUSES = ("scheduled", "confirmed", "in_progress")
STATUSES = tuple(value for value, _label in Appointment.STATUS_CHOICES)


class AppointmentService:
    @staticmethod
    def find_conflicts(assigned_to_id, start, duration, exclude_id=None):
        """
        Non-cancelled appointments of ``assigned_to_id`` overlapping
        ``[start, start + duration)``.
        """
        if not assigned_to_id:
            return []

        end = start + timedelta(minutes=duration)
        queryset = Appointment.objects.filter(
            assigned_to_id=assigned_to_id, appointment_date__lt=end
        ).exclude(status="cancelled")
        if exclude_id:
            queryset = queryset.exclude(pk=exclude_id)
        # end times depend on each row's duration
        return [appt for appt in queryset if appt.end_time > start]

    @classmethod
    def check_availability(cls, assigned_to_id, start, duration, exclude_id=None):
        conflicts = cls.find_conflicts(assigned_to_id, start, duration, exclude_id)
        if conflicts:
            clash = conflicts[0]
            raise ValidationError(
                _("The assigned staff member already has an appointment at this time"),
                detail={
                    "appointment_date": [
                        f"Overlaps with '{clash.title}' at {clash.appointment_date:%Y-%m-%d %H:%M}."
                    ]
                },
            )

    @classmethod
    @transaction.atomic
    def create_appointment(cls, data, user=None):
        data = dict(data)
        location = data.get("location")
        CustomerService.ensure_at_location(
            data.get("customer"), data.get("location_id") or getattr(location, "pk", None)
        )
        assigned_to = data.get("assigned_to")
        cls.check_availability(
            getattr(assigned_to, "pk", None), data["appointment_date"], data.get("duration", 60)
        )
        appointment = Appointment.objects.create(created_by=user, **data)
        logger.info(f"Appointment {appointment.id} scheduled for {appointment.appointment_date}")

        from apps.notificationsapp.services.notification_service import NotificationService

        try:
            with transaction.atomic():
                NotificationService.notify_admins(
                    "appointment_scheduled",
                    title="Appointment scheduled",
                    message=f"{appointment.title} with {appointment.customer.name} on "
                    f"{appointment.appointment_date:%Y-%m-%d %H:%M}",
                    data={"appointment_id": str(appointment.id)},
                    location_id=appointment.location_id,
                    sender=user,
                    related_entity_type="appointment",
                    related_entity_id=str(appointment.id),
                )
        except Exception:
            logger.exception(f"Could not notify about appointment {appointment.id}")
        return appointment

    @classmethod
    @transaction.atomic
    def update_appointment(cls, appointment, data):
        if "customer" in data:
            CustomerService.ensure_at_location(data["customer"], appointment.location_id)
        start = data.get("appointment_date", appointment.appointment_date)
        duration = data.get("duration", appointment.duration)
        assigned_to = data.get("assigned_to", appointment.assigned_to)
        status = data.get("status", appointment.status)
        if status != "cancelled":
            cls.check_availability(
                getattr(assigned_to, "pk", None), start, duration, exclude_id=appointment.pk
            )
        for field, value in data.items():
            setattr(appointment, field, value)
        appointment.save()
        return appointment

    @classmethod
    @transaction.atomic
    def set_status(cls, appointment, status):
        if status not in STATUSES:
            raise ValidationError(
                _("Invalid appointment status"),
                detail={"status": [f"Must be one of: {', '.join(STATUSES)}."]},
            )
        if appointment.status == "cancelled" and status != "cancelled":
            # a reopened slot may have been booked meanwhile
            cls.check_availability(
                appointment.assigned_to_id,
                appointment.appointment_date,
                appointment.duration,
                exclude_id=appointment.pk,
            )
        appointment.status = status
        appointment.save(update_fields=["status", "updated_at"])
        logger.info(f"Appointment {appointment.id} set to {status}")
        return appointment

    @staticmethod
    def upcoming(queryset):
        return queryset.filter(
            appointment_date__gte=timezone.now(), status__in=OPEN_STATUSES
        ).order_by("appointment_date")
