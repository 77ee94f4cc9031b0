from datetime import datetime

from freelancehub.email_templates import (
    assignment_deadline_missed_company_template,
    assignment_deadline_missed_template,
    assignment_deadline_reminder_template,
    format_datetime,
    interview_missed_template,
)

DEADLINE = datetime(2025, 6, 1, 17, 30)


def test_format_datetime():
    assert format_datetime(DEADLINE) == "Sunday, June 01, 2025 at 05:30 PM"


def test_freelancer_rejection_mentions_job_and_deadline():
    mjml = assignment_deadline_missed_template("Ada", "Data Engineer", DEADLINE)

    assert mjml.strip().startswith("<mjml>")
    assert "Hi <strong>Ada</strong>" in mjml
    assert "Data Engineer" in mjml
    assert format_datetime(DEADLINE) in mjml
    assert "Application rejected" in mjml


def test_company_notice_names_the_freelancer():
    mjml = assignment_deadline_missed_company_template("Ada", "Data Engineer", DEADLINE)

    assert "<strong>Ada</strong> missed the assignment deadline" in mjml
    assert "automatically rejected" in mjml


def test_interview_missed_mentions_scheduled_time():
    mjml = interview_missed_template("Ada", "Data Engineer", DEADLINE)

    assert "missed the scheduled interview" in mjml
    assert format_datetime(DEADLINE) in mjml


def test_reminder_has_hours_left_and_call_to_action():
    mjml = assignment_deadline_reminder_template(
        freelancer_name="Ada",
        job_title="Data Engineer",
        deadline=DEADLINE,
        hours_left=7,
        dashboard_url="https://hub.example/freelancer-dashboard",
    )

    assert "<strong>7 hours</strong>" in mjml
    assert 'href="https://hub.example/freelancer-dashboard"' in mjml
    assert "Submit Assignment Now" in mjml


def test_user_supplied_text_is_escaped():
    mjml = assignment_deadline_missed_company_template(
        "<script>alert(1)</script>", "R&D <Lead>", DEADLINE
    )

    assert "<script>" not in mjml
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in mjml
    assert "R&amp;D &lt;Lead&gt;" in mjml
