"""Password-reset email delivery through Amazon SES."""

import logging
from typing import Any

from nomada.errors import ResetRequestError

logger = logging.getLogger(__name__)

_SUBJECT = "Reset your Nomada password"
_BODY = (
    "We received a request to reset your Nomada password.\n\n"
    "Open the link below to choose a new one:\n{link}\n\n"
    "If you did not ask for this, you can ignore this email."
)


class PasswordResetMailer:
    def __init__(self, ses_client: Any, sender: str) -> None:
        self._ses = ses_client
        self._sender = sender

    async def send_reset_link(self, email: str, link: str) -> None:
        if not self._sender:
            raise ResetRequestError("RESET_EMAIL_SENDER not configured")
        try:
            response = self._ses.send_email(
                Source=self._sender,
                Destination={"ToAddresses": [email]},
                Message={
                    "Subject": {"Data": _SUBJECT, "Charset": "UTF-8"},
                    "Body": {"Text": {"Data": _BODY.format(link=link), "Charset": "UTF-8"}},
                },
            )
        except Exception as e:
            raise ResetRequestError(f"Reset email delivery failed: {e}") from e
        logger.info("Sent password reset email, message id %s", response.get("MessageId"))
