"""
SMS delivery for one-time codes
Sends through Twilio when credentials are configured, otherwise only logs
"""

import logging
from typing import Optional

import httpx

from ..config import IS_PRODUCTION, TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN, TWILIO_FROM_NUMBER

logger = logging.getLogger(__name__)

TWILIO_MESSAGES_URL = "https://api.twilio.com/2010-04-01/Accounts/{sid}/Messages.json"


def to_e164_india(phone: str) -> str:
    return phone if phone.startswith("+") else f"+91{phone}"


class SmsSender:
    def __init__(
        self,
        account_sid: Optional[str] = TWILIO_ACCOUNT_SID,
        auth_token: Optional[str] = TWILIO_AUTH_TOKEN,
        from_number: Optional[str] = TWILIO_FROM_NUMBER,
    ):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number

    @property
    def configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)

    async def send_otp(self, phone: str, code: str, purpose: str) -> tuple[bool, Optional[str]]:
        """
        Send an OTP message

        Returns:
            Tuple of (success: bool, error_message: Optional[str])
        """
        body = f"KisanDecks {purpose} OTP: {code}. Valid for 10 minutes. Do not share it with anyone."

        if not self.configured:
            if IS_PRODUCTION:
                logger.warning(f"⚠️ Twilio not configured, OTP for {phone[-4:].rjust(10, '*')} not delivered")
            else:
                logger.info(f"[DEV] {purpose} OTP for {phone}: {code}")
            return False, "SMS provider not configured"

        try:
            logger.info(f"📱 Sending {purpose} OTP SMS to {phone[-4:].rjust(10, '*')}")
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    TWILIO_MESSAGES_URL.format(sid=self.account_sid),
                    auth=(self.account_sid, self.auth_token),
                    data={"To": to_e164_india(phone), "From": self.from_number, "Body": body},
                    timeout=10.0,
                )
            logger.info(f"📡 Twilio API response status: {response.status_code}")

            if response.status_code in (200, 201):
                return True, None

            error_message = response.json().get("message", "Unknown error")
            logger.error(f"❌ Twilio rejected OTP SMS: {error_message}")
            return False, error_message
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"❌ Failed to send OTP SMS: {str(e)}")
            return False, str(e)


def get_sms_sender() -> SmsSender:
    """Dependency injection for SmsSender"""
    return SmsSender()
