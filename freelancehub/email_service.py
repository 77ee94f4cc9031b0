"""
Email Service using an SMTP mailbox or Resend (fallback)
Compiles MJML templates to HTML and dispatches deadline notifications
"""

import logging
import smtplib
import ssl
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Union

import resend
from mjml import mjml_to_html

from . import config
from .email_templates import (
    assignment_deadline_missed_company_template,
    assignment_deadline_missed_template,
    assignment_deadline_reminder_template,
    interview_missed_template,
)

logger = logging.getLogger(__name__)

# Initialize Resend as fallback
resend.api_key = config.RESEND_API_KEY


class EmailDeliveryError(Exception):
    """Raised when no transport could deliver a message"""


def send_via_smtp(
    to: Union[str, list[str]],
    subject: str,
    html_content: str,
    from_address: str,
) -> dict:
    """Send email through the configured SMTP mailbox"""
    try:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = from_address
        msg["To"] = to if isinstance(to, str) else ", ".join(to)
        msg.attach(MIMEText(html_content, "html"))

        recipients = [to] if isinstance(to, str) else to

        if config.SMTP_PORT == 465:
            context = ssl.create_default_context()
            server = smtplib.SMTP_SSL(config.SMTP_HOST, config.SMTP_PORT, context=context, timeout=30)
        else:
            server = smtplib.SMTP(config.SMTP_HOST, config.SMTP_PORT, timeout=30)
            if config.SMTP_USE_TLS:
                context = ssl.create_default_context()
                server.starttls(context=context)

        try:
            if config.SMTP_USERNAME:
                server.login(config.SMTP_USERNAME, config.SMTP_PASSWORD or "")
            server.sendmail(from_address.split("<")[-1].rstrip(">"), recipients, msg.as_string())
        finally:
            server.quit()

        logger.info(f"✅ SMTP email sent successfully via {config.SMTP_HOST}")
        return {"id": f"smtp-{datetime.utcnow().timestamp()}", "success": True}

    except Exception as e:
        logger.error(f"❌ SMTP send failed: {e}")
        raise EmailDeliveryError(f"SMTP failed: {str(e)}") from e


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(mjml_content)
        # mjml_to_html returns a dict with 'html' and 'errors' keys
        if isinstance(result, dict):
            if result.get("errors"):
                logger.warning(f"MJML compilation warnings: {result['errors']}")
            return result.get("html", "")
        return str(result)
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise EmailDeliveryError(f"Failed to compile MJML template: {str(e)}") from e


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    mjml_content: str,
) -> dict:
    """
    Send an email using SMTP (if configured) or Resend (fallback)

    Args:
        to: Recipient email(s)
        subject: Email subject line
        mjml_content: MJML template content (will be compiled to HTML)

    Returns:
        Send response dict carrying the provider message id
    """
    html_content = compile_mjml_to_html(mjml_content)

    recipients = [to] if isinstance(to, str) else to
    sender = config.EMAIL_FROM_ADDRESS

    if config.SMTP_HOST:
        try:
            logger.info(f"📧 Sending email via SMTP: {config.SMTP_HOST}")
            return send_via_smtp(
                to=recipients,
                subject=subject,
                html_content=html_content,
                from_address=sender,
            )
        except EmailDeliveryError as e:
            logger.warning(f"⚠️ SMTP failed, falling back to Resend: {e}")

    if not config.RESEND_API_KEY:
        logger.error("❌ No email service configured - RESEND_API_KEY missing and no SMTP")
        raise EmailDeliveryError("Email service not configured")

    try:
        logger.info(f"📧 Sending email via Resend to: {to}")
        response = resend.Emails.send(
            {
                "from": sender,
                "to": recipients,
                "subject": subject,
                "html": html_content,
            }
        )
        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return response
    except Exception as e:
        logger.error(f"❌ Email send error to {recipients}: {e}")
        raise EmailDeliveryError(f"Failed to send email: {str(e)}") from e


# ============================================
# Deadline notifications
# ============================================


async def send_assignment_deadline_missed_email(
    to: str, freelancer_name: str, job_title: str, deadline: datetime
) -> dict:
    """Tell the freelancer their application was closed for a missed assignment"""
    return await send_email(
        to=to,
        subject=f"⏰ Assignment Deadline Missed - {job_title}",
        mjml_content=assignment_deadline_missed_template(freelancer_name, job_title, deadline),
    )


async def send_assignment_deadline_missed_company_email(
    to: str, freelancer_name: str, job_title: str, deadline: datetime
) -> dict:
    """Tell the company a candidate missed the assignment deadline"""
    return await send_email(
        to=to,
        subject=f"⏰ Assignment Deadline Missed by {freelancer_name}",
        mjml_content=assignment_deadline_missed_company_template(
            freelancer_name, job_title, deadline
        ),
    )


async def send_interview_missed_email(
    to: str, freelancer_name: str, job_title: str, scheduled_date: datetime
) -> dict:
    """Tell the freelancer their application was closed for a missed interview"""
    return await send_email(
        to=to,
        subject=f"⏰ Interview Missed - {job_title}",
        mjml_content=interview_missed_template(freelancer_name, job_title, scheduled_date),
    )


async def send_assignment_deadline_reminder_email(
    to: str, freelancer_name: str, job_title: str, deadline: datetime, hours_left: int
) -> dict:
    """Remind the freelancer that an assignment is due soon"""
    return await send_email(
        to=to,
        subject=f"⏰ Assignment Deadline Reminder - {hours_left} hours left",
        mjml_content=assignment_deadline_reminder_template(
            freelancer_name=freelancer_name,
            job_title=job_title,
            deadline=deadline,
            hours_left=hours_left,
            dashboard_url=f"{config.FRONTEND_URL}/freelancer-dashboard",
        ),
    )
