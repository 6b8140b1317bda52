"""Application notifications – outbound SMS port + in-memory fake."""
from smskit.application.notifications.sms import InMemorySmsClient, SmsClient

__all__ = ["InMemorySmsClient", "SmsClient"]
