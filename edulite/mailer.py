import logging
import smtplib
from email.mime.text import MIMEText

from .config import settings

logger = logging.getLogger(__name__)


class MailDispatchError(Exception):
    pass


def smtp_configured() -> bool:
    return bool(settings.smtp_username and settings.smtp_password)


def send_reset_token(*, recipient: str, username: str, token: str) -> bool:
    """Deliver a password-reset token.

    Returns True when the mail was handed to the SMTP server. Without SMTP
    credentials, or when the username is not an e-mail address, the token is
    only written to the DEBUG log for local development and False is returned.
    """
    if not smtp_configured() or "@" not in recipient:
        logger.warning(f"SMTP not configured or no mail address for {username}; reset code not sent")
        logger.debug(f"Development reset code for {username}: {token}")
        return False

    body = (
        f"A password reset was requested for {username}.\n\n"
        f"Your reset code is: {token}\n\n"
        f"It expires in {settings.reset_token_exp_minutes} minutes."
    )
    msg = MIMEText(body)
    msg["Subject"] = "EduLite password reset"
    msg["From"] = settings.smtp_username
    msg["To"] = recipient

    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=15) as server:
            server.starttls()
            server.login(settings.smtp_username, settings.smtp_password)
            server.sendmail(settings.smtp_username, [recipient], msg.as_string())
    except (smtplib.SMTPException, OSError) as exc:
        raise MailDispatchError(f"Failed to send reset email: {exc}") from exc
    return True
