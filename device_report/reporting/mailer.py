"""
Mail delivery of the report file
"""

import smtplib
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formatdate
from pathlib import Path
from typing import Union

import structlog

from device_report.core.config import Settings
from device_report.core.exceptions import MailError

logger = structlog.get_logger(__name__)


def build_message(settings: Settings, attachment_path: Path) -> MIMEMultipart:
    """Compose the report mail with the spreadsheet attached"""
    msg = MIMEMultipart("mixed")
    msg["Subject"] = f"{settings.mail_subject} ({attachment_path.stem})"
    msg["From"] = settings.mail_from
    msg["To"] = ", ".join(settings.mail_recipients)
    msg["Date"] = formatdate(localtime=False)

    body = (
        "The device health report is attached.\n\n"
        f"Window: last {settings.window_days} days\n"
        f"Status threshold: {settings.status_threshold:.0%}\n"
    )
    msg.attach(MIMEText(body, "plain", "utf-8"))

    attachment = MIMEApplication(attachment_path.read_bytes(), _subtype="tab-separated-values")
    attachment.add_header("Content-Disposition", "attachment", filename=attachment_path.name)
    msg.attach(attachment)
    return msg


def send_report(settings: Settings, attachment_path: Union[str, Path]) -> None:
    """
    Send the report file to the configured recipients over SMTP.

    Raises:
        MailError: If there are no recipients, the attachment cannot be read
            or the SMTP exchange fails
    """
    attachment_path = Path(attachment_path)
    recipients = settings.mail_recipients
    if not recipients:
        raise MailError("No mail recipients configured")

    try:
        msg = build_message(settings, attachment_path)
    except OSError as e:
        raise MailError(f"Cannot read attachment {attachment_path}: {e}") from e

    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=settings.smtp_timeout) as smtp:
            if settings.smtp_starttls:
                smtp.starttls()
            if settings.smtp_user:
                smtp.login(settings.smtp_user, settings.smtp_password or "")
            smtp.sendmail(settings.mail_from, recipients, msg.as_string())
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Failed to send report mail", host=settings.smtp_host, error=str(e))
        raise MailError(f"Failed to send report mail: {e}") from e

    logger.info("Report mail sent", recipients=len(recipients), attachment=attachment_path.name)
