"""Email delivery for portfolio reports and alert digests."""
import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from ..config import EmailConfig

logger = logging.getLogger(__name__)


class EmailNotifier:
    """Send reports and alert digests over SMTP with STARTTLS."""

    def __init__(self, config: EmailConfig) -> None:
        self.alert_email = config.alert_email
        self.smtp_server = config.smtp_server
        self.smtp_port = config.smtp_port
        self.sender_email = config.sender_email
        self.sender_password = config.sender_password

    def _build_message(self, body: str, subject: str) -> MIMEMultipart:
        msg = MIMEMultipart()
        msg["From"] = self.sender_email
        msg["To"] = self.alert_email
        msg["Subject"] = subject
        msg.attach(MIMEText(body, "plain"))
        return msg

    def _deliver(self, msg: MIMEMultipart) -> None:
        with smtplib.SMTP(self.smtp_server, self.smtp_port) as server:
            server.starttls()
            server.login(self.sender_email, self.sender_password)
            server.send_message(msg)

    async def _send(self, body: str, subject: str) -> bool:
        if not self.alert_email:
            logger.debug("No recipient email configured, skipping email")
            return False

        if not self.sender_email or not self.sender_password:
            logger.warning("Email credentials not configured")
            return False

        msg = self._build_message(body, subject)
        try:
            await asyncio.to_thread(self._deliver, msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email: %s", e)
            return False

        logger.info("Email '%s' sent to %s", subject, self.alert_email)
        return True

    async def send_report(
        self, message: str, subject: str = "", silent: bool = True
    ) -> bool:
        return await self._send(message, subject or "RWA Portfolio Report")

    async def send_alert(self, message: str, subject: str = "") -> bool:
        return await self._send(message, subject or "RWA Alert")
