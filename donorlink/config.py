import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    supabase_url: str = os.getenv("SUPABASE_URL", "")
    supabase_key: str = os.getenv("SUPABASE_KEY", "")
    api_url: str = os.getenv("API_URL", "http://localhost:8000")
    frontend_url: str = os.getenv("FRONTEND_URL", "http://localhost:3000")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Risk tiers (fraud score)
    high_risk_threshold: int = 70
    medium_risk_threshold: int = 40
    low_risk_threshold: int = 20

    # Notification gate: warning and suppression are independent
    fraud_warning_threshold: int = 50
    notification_suppression_threshold: int = 80
    admin_alert_threshold: int = 70

    # Matching
    donor_search_radius_km: float = 20.0
    max_donors_notified: int = 50
    max_nearby_requests: int = 20
    donation_interval_days: int = 56

    # Notification transport
    disable_notifications: bool = os.getenv("DISABLE_NOTIFICATIONS", "false").lower() == "true"
    notification_timeout_seconds: float = 5.0
    notification_delay_seconds: float = 0.1
    smtp_host: str = os.getenv("SMTP_HOST", "smtp.gmail.com")
    smtp_port: int = int(os.getenv("SMTP_PORT", "587"))
    smtp_user: str = os.getenv("SMTP_USER", "")
    smtp_password: str = os.getenv("SMTP_PASS", "")
    sms_enabled: bool = os.getenv("SMS_ENABLED", "false").lower() == "true"
    twilio_account_sid: str = os.getenv("TWILIO_ACCOUNT_SID", "")
    twilio_auth_token: str = os.getenv("TWILIO_AUTH_TOKEN", "")
    twilio_from_number: str = os.getenv("TWILIO_PHONE", "")

    # Scoring I/O
    count_query_workers: int = 3

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
