import logging

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)


class EmailService:
    """
    Plain-text email delivery for notifications.
    """

    @staticmethod
    def send_email(to_email, subject, message, from_email=None):
        """
        Send a plain-text email.

        Returns:
            Boolean indicating success
        """
        if not to_email:
            return False
        try:
            send_mail(
                subject,
                message,
                from_email or settings.DEFAULT_FROM_EMAIL,
                [to_email],
                fail_silently=False,
            )
        except Exception as e:
            logger.error(f"Error sending email to {to_email}: {str(e)}")
            return False
        logger.info(f"Email '{subject}' sent to {to_email}")
        return True
