import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from slotbook.core.config import settings
from slotbook.models.booking import Booking
from slotbook.models.config import OwnerConfig

logger = logging.getLogger(__name__)


def _send_email_sync(config: OwnerConfig, to_email: str, subject: str, html_body: str) -> None:
    """Send email via SMTP (blocking). Use from background task."""
    smtp = config.smtp
    if not smtp.enabled:
        logger.debug("Email disabled (SMTP not configured), skipping send")
        return
    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f"{config.owner_name} <{smtp.user}>"
    msg["To"] = to_email
    msg.attach(MIMEText(html_body, "html", "utf-8"))
    try:
        with smtplib.SMTP(smtp.host, smtp.port, timeout=settings.smtp_timeout_seconds) as server:
            server.starttls()
            server.login(smtp.user, smtp.password)
            server.sendmail(smtp.user, [to_email], msg.as_string())
        logger.info("Email sent to %s", to_email)
    except Exception as e:
        logger.exception("Failed to send email to %s: %s", to_email, e)


def _slot_display(config: OwnerConfig, booking: Booking) -> tuple[str, str]:
    local = booking.localized(config.tz)
    start = local.start_time.astimezone(config.tz)
    end = local.end_time.astimezone(config.tz)
    date_str = start.strftime("%A, %B %d, %Y")
    time_str = f"{start:%H:%M} – {end:%H:%M} ({config.timezone})"
    return date_str, time_str


def _meeting_label(config: OwnerConfig, booking: Booking) -> str:
    if not booking.meeting_type:
        return "Meeting"
    meeting_type = config.meeting_type(booking.meeting_type)
    return meeting_type.name if meeting_type else booking.meeting_type


def build_booking_confirmation_html(config: OwnerConfig, booking: Booking) -> str:
    """HTML body for the booker's confirmation."""
    date_str, time_str = _slot_display(config, booking)
    logo_html = ""
    if config.logo_url:
        logo_html = (
            f'<img src="{html.escape(config.logo_url)}" alt="{html.escape(config.owner_name)}" '
            'width="120" style="display:block;margin-bottom:24px;" />'
        )
    notes_section = ""
    if booking.notes:
        notes_section = f"""
        <p style="margin:0 0 16px 0;color:#374151;"><strong>Your notes:</strong></p>
        <p style="margin:0 0 24px 0;color:#6b7280;font-size:14px;">{html.escape(booking.notes)}</p>
        """
    return f"""
<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>Booking Confirmation</title>
</head>
<body style="margin:0;padding:0;font-family:-apple-system,BlinkMacSystemFont,'Segoe UI',Roboto,sans-serif;background-color:#f3f4f6;">
  <table role="presentation" width="100%" cellspacing="0" cellpadding="0" style="max-width:560px;margin:40px auto;background:#ffffff;border-radius:12px;">
    <tr>
      <td style="padding:32px;border-top:4px solid {html.escape(config.brand_color)};">
        {logo_html}
        <h1 style="margin:0 0 8px 0;font-size:22px;color:#111827;">{html.escape(_meeting_label(config, booking))} confirmed</h1>
        <p style="margin:0 0 24px 0;font-size:15px;color:#6b7280;">Hi {html.escape(booking.name or 'there')}, you're booked with {html.escape(config.owner_name)}.</p>
        <p style="margin:0;font-size:16px;font-weight:600;color:#111827;">{date_str}</p>
        <p style="margin:4px 0 24px 0;font-size:16px;color:#111827;">{time_str}</p>
        {notes_section}
        <p style="margin:0;font-size:13px;color:#6b7280;">Booking reference: {booking.id}</p>
      </td>
    </tr>
  </table>
</body>
</html>
"""


def build_owner_notification_html(config: OwnerConfig, booking: Booking) -> str:
    date_str, time_str = _slot_display(config, booking)
    notes = html.escape(booking.notes) if booking.notes else "–"
    return f"""
<!DOCTYPE html>
<html>
<body style="font-family:sans-serif;color:#111827;">
  <h2>New booking: {html.escape(_meeting_label(config, booking))}</h2>
  <p><strong>{html.escape(booking.name)}</strong> &lt;{html.escape(booking.email)}&gt;</p>
  <p>{date_str}<br>{time_str}</p>
  <p>Notes: {notes}</p>
  <p style="color:#6b7280;font-size:13px;">Booking id: {booking.id}</p>
</body>
</html>
"""


def send_booking_emails(config: OwnerConfig, booking: Booking) -> None:
    """Confirmation to the booker and a notice to the owner (call from background task)."""
    label = _meeting_label(config, booking)
    _send_email_sync(
        config,
        booking.email,
        f"{label} with {config.owner_name} – Confirmed",
        build_booking_confirmation_html(config, booking),
    )
    if config.owner_email:
        _send_email_sync(
            config,
            config.owner_email,
            f"New booking – {booking.name}",
            build_owner_notification_html(config, booking),
        )
