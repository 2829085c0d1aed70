import logging
from smtplib import SMTPException

from django.conf import settings
from django.core.mail import EmailMultiAlternatives

from core.common.errors import OtpDeliveryError

logger = logging.getLogger(__name__)

SUBJECT = "Your verification code"


def send_otp_email(email: str, code: str, ttl_minutes=None) -> None:
    ttl_minutes = ttl_minutes or max(1, settings.OTP_TTL_SECONDS // 60)
    from_email = getattr(settings, "DEFAULT_FROM_EMAIL", None) or "no-reply@localhost"

    text = f"Your verification code is {code}. It expires in {ttl_minutes} minutes."
    html = f"<p>Your verification code is <strong>{code}</strong>. It expires in {ttl_minutes} minutes.</p>"

    msg = EmailMultiAlternatives(subject=SUBJECT, body=text, from_email=from_email, to=[email])
    msg.attach_alternative(html, "text/html")
    try:
        msg.send(fail_silently=False)
    except (SMTPException, OSError) as e:
        logger.exception("Failed to send verification code to %s", email)
        raise OtpDeliveryError() from e

    logger.info("Verification code sent to %s", email)
