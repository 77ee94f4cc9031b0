"""
MJML Email Templates
Deadline notifications sent by the scheduler, built on one responsive layout
"""

import html
from typing import Optional

# App theme colors - Emerald/Slate color scheme
THEME = {
    "primary": "#10b981",
    "primary_dark": "#059669",
    "background": "#f4f4f4",
    "card_bg": "#ffffff",
    "text_primary": "#0f172a",
    "text_secondary": "#334155",
    "text_muted": "#64748b",
    "border": "#e2e8f0",
    "warning": "#f59e0b",
    "warning_light": "#fef3c7",
    "danger": "#ef4444",
    "danger_light": "#fee2e2",
}

BRAND_NAME = "FreelanceHub"


def sanitize_string(value: Optional[str]) -> str:
    """Escape HTML special characters in user-supplied text before it is templated"""
    if value is None:
        return ""
    return html.escape(str(value), quote=True)


def format_datetime(value) -> str:
    """Human readable timestamp used in emails and timeline notes"""
    return value.strftime("%A, %B %d, %Y at %I:%M %p")


def get_base_template(
    title: str,
    preview_text: str,
    content_sections: str,
    accent_color: str = THEME["primary"],
    cta_url: Optional[str] = None,
    cta_label: Optional[str] = None,
) -> str:
    """Base MJML template wrapper for all emails"""

    cta_section = ""
    if cta_url and cta_label:
        cta_section = f"""
        <mj-section background-color="#ffffff" padding="0 40px 40px 40px">
          <mj-column>
            <mj-button
              href="{cta_url}"
              background-color="{THEME['primary']}"
              color="#ffffff"
              font-weight="600"
              border-radius="8px"
              padding="12px 24px"
              font-size="16px">
              {cta_label}
            </mj-button>
          </mj-column>
        </mj-section>
        """

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <!-- Header -->
        <mj-section background-color="{accent_color}" padding="30px 20px">
          <mj-column>
            <mj-text align="center" font-size="28px" font-weight="600" color="#ffffff" padding="0">
              {title}
            </mj-text>
          </mj-column>
        </mj-section>

        <!-- Main Content -->
        <mj-section background-color="#ffffff" padding="40px 30px 24px 30px">
          <mj-column>
            {content_sections}
          </mj-column>
        </mj-section>

        {cta_section}

        <!-- Footer -->
        <mj-section padding="20px">
          <mj-column>
            <mj-text align="center" font-size="13px" color="{THEME['text_muted']}" padding="0">
              © {BRAND_NAME}. All rights reserved.
            </mj-text>
            <mj-text align="center" font-size="12px" color="#94a3b8" padding="12px 0 0 0">
              This is an automated email. Please do not reply.
            </mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def _callout(body: str, background: str, border: str) -> str:
    return f"""
    <mj-text padding="20px 0">
      <div style="background: {background}; border-left: 4px solid {border}; padding: 15px; border-radius: 8px;">
        {body}
      </div>
    </mj-text>
    """


def assignment_deadline_missed_template(freelancer_name: str, job_title: str, deadline) -> str:
    """Freelancer-facing rejection after a missed assignment deadline"""
    freelancer_name, job_title = sanitize_string(freelancer_name), sanitize_string(job_title)
    expired_box = _callout(
        f"<strong>Deadline was:</strong> {format_datetime(deadline)}<br>"
        "<strong>Status:</strong> Application rejected",
        THEME["danger_light"],
        THEME["danger"],
    )
    content = f"""
    <mj-text>
      Hi <strong>{freelancer_name}</strong>,
    </mj-text>

    <mj-text>
      Unfortunately, you missed the deadline for the assignment in your application for
      <strong>{job_title}</strong>.
    </mj-text>

    {expired_box}

    <mj-text>
      We encourage you to apply for other opportunities and ensure timely submission of
      assignments in the future.
    </mj-text>
    """
    return get_base_template(
        title="⏰ Assignment Deadline Missed",
        preview_text=f"Your application for {job_title} has been closed",
        content_sections=content,
        accent_color=THEME["danger"],
    )


def assignment_deadline_missed_company_template(
    freelancer_name: str, job_title: str, deadline
) -> str:
    """Company-facing notice that a candidate missed the assignment deadline"""
    freelancer_name, job_title = sanitize_string(freelancer_name), sanitize_string(job_title)
    content = f"""
    <mj-text>
      <strong>{freelancer_name}</strong> missed the assignment deadline for
      <strong>{job_title}</strong>.
    </mj-text>

    <mj-text>
      <strong>Deadline was:</strong> {format_datetime(deadline)}
    </mj-text>

    <mj-text>
      The application has been automatically rejected.
    </mj-text>
    """
    return get_base_template(
        title="⏰ Assignment Deadline Missed",
        preview_text=f"{freelancer_name} missed the assignment deadline",
        content_sections=content,
        accent_color=THEME["danger"],
    )


def interview_missed_template(freelancer_name: str, job_title: str, scheduled_date) -> str:
    """Freelancer-facing rejection after a no-show interview"""
    freelancer_name, job_title = sanitize_string(freelancer_name), sanitize_string(job_title)
    content = f"""
    <mj-text>
      Hi <strong>{freelancer_name}</strong>,
    </mj-text>

    <mj-text>
      You missed the scheduled interview for <strong>{job_title}</strong>.
    </mj-text>

    <mj-text>
      <strong>Scheduled time:</strong> {format_datetime(scheduled_date)}
    </mj-text>

    <mj-text>
      Your application has been automatically rejected.
    </mj-text>
    """
    return get_base_template(
        title="⏰ Interview Missed",
        preview_text=f"Your interview for {job_title} was missed",
        content_sections=content,
        accent_color=THEME["danger"],
    )


def assignment_deadline_reminder_template(
    freelancer_name: str,
    job_title: str,
    deadline,
    hours_left: int,
    dashboard_url: str,
) -> str:
    """Reminder sent while an assignment is due within the reminder window"""
    freelancer_name, job_title = sanitize_string(freelancer_name), sanitize_string(job_title)
    deadline_box = _callout(
        f"<strong>Deadline:</strong> {format_datetime(deadline)}",
        THEME["warning_light"],
        THEME["warning"],
    )
    content = f"""
    <mj-text>
      Hi <strong>{freelancer_name}</strong>,
    </mj-text>

    <mj-text>
      This is a reminder that your assignment for <strong>{job_title}</strong> is due in
      approximately <strong>{hours_left} hours</strong>.
    </mj-text>

    {deadline_box}
    """
    return get_base_template(
        title="⏰ Assignment Deadline Approaching!",
        preview_text=f"{hours_left} hours left to submit your assignment",
        content_sections=content,
        accent_color=THEME["warning"],
        cta_url=dashboard_url,
        cta_label="Submit Assignment Now",
    )
