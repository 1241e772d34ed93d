import logging

logger = logging.getLogger(__name__)


class PushService:
    """
    Push channel placeholder: there is no push provider, deliveries are logged.
    """

    @staticmethod
    def send_push(user, title, message, data=None):
        logger.info(f"PUSH to {user.pk}: {title} - {message[:50]}")
        return True
