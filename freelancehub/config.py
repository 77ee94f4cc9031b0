import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./freelancehub.db")

# Frontend base URL for dashboard links in emails
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

# Resend Email Configuration (fallback)
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
EMAIL_FROM_ADDRESS = os.getenv("EMAIL_FROM_ADDRESS", "FreelanceHub <noreply@freelancehub.dev>")

# SMTP mailbox (e.g. smtp.gmail.com with an app password). Used first when SMTP_HOST is set.
SMTP_HOST = os.getenv("SMTP_HOST")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USERNAME = os.getenv("SMTP_USERNAME")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
SMTP_USE_TLS = os.getenv("SMTP_USE_TLS", "true").lower() == "true"

# Admin routes that trigger the scheduler manually. Disabled when unset.
SCHEDULER_ADMIN_TOKEN = os.getenv("SCHEDULER_ADMIN_TOKEN")

# Deadline policy
INTERVIEW_GRACE_PERIOD_HOURS = float(os.getenv("INTERVIEW_GRACE_PERIOD_HOURS", "2"))
REMINDER_WINDOW_HOURS = float(os.getenv("REMINDER_WINDOW_HOURS", "24"))

# Cron cadence (server local time)
SWEEP_MINUTE = int(os.getenv("SWEEP_MINUTE", "0"))  # hourly at :00
REMINDER_HOUR = int(os.getenv("REMINDER_HOUR", "9"))  # daily at 09:00
REMINDER_MINUTE = int(os.getenv("REMINDER_MINUTE", "0"))

# ARQ cancels a job after this many seconds. Sweeps run well under it.
SCHEDULER_JOB_TIMEOUT = int(os.getenv("SCHEDULER_JOB_TIMEOUT", "86400"))
