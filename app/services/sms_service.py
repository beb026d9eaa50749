"""
app/services/sms_service.py

Purpose: OTP delivery over SMS

- Sends plain SMS through the Twilio REST API
- Falls back to logging the code when Twilio is not configured
  (development and staging)
"""

import httpx
from typing import Any, Dict, Optional
from app.core.config import settings
from app.core.logging import get_logger, mask_phone
from utils.constants import MSG_OTP_SMS

logger = get_logger(__name__)


class SMSService:
    """Service for sending SMS via Twilio"""

    def __init__(self):
        self.account_sid = settings.TWILIO_ACCOUNT_SID
        self.auth_token = settings.TWILIO_AUTH_TOKEN
        self.from_number = settings.TWILIO_SMS_NUMBER
        self.base_url = f"https://api.twilio.com/2010-04-01/Accounts/{self.account_sid}"

    def is_configured(self) -> bool:
        """Check if Twilio is properly configured"""
        return bool(
            self.account_sid
            and self.auth_token
            and self.from_number
        )

    async def send_message(self, to_phone: str, message: str) -> Dict[str, Any]:
        """
        Sends an SMS via Twilio

        Args:
            to_phone: Recipient phone (+919876543210)
            message: Message text

        Returns:
            {
                "success": True/False,
                "message_sid": "SMxxx...",
                "error": "Optional error message"
            }
        """
        try:
            url = f"{self.base_url}/Messages.json"

            data = {
                "From": self.from_number,
                "To": to_phone,
                "Body": message
            }

            logger.info(f"Sending SMS to {mask_phone(to_phone)}")

            async with httpx.AsyncClient() as client:
                response = await client.post(
                    url,
                    data=data,
                    auth=(self.account_sid, self.auth_token),
                    timeout=10.0
                )

            if response.status_code in [200, 201]:
                result = response.json()
                logger.info(f"SMS sent: SID={result.get('sid')}")

                return {
                    "success": True,
                    "message_sid": result.get("sid"),
                    "status": result.get("status")
                }

            logger.error(f"Twilio API error: {response.status_code} - {response.text}")
            return {
                "success": False,
                "error": f"Twilio API error: {response.status_code}"
            }

        except httpx.TimeoutException:
            logger.error("Twilio API timeout")
            return {
                "success": False,
                "error": "Twilio API timeout"
            }
        except httpx.RequestError as e:
            logger.error(f"Network error sending SMS: {e}")
            return {
                "success": False,
                "error": "Network error connecting to Twilio"
            }

    async def send_otp(self, to_phone: str, otp: str, expiry_minutes: int) -> Dict[str, Any]:
        """
        Delivers a login OTP. Without Twilio credentials the code is only logged.
        """
        if not self.is_configured():
            logger.info(f"OTP for {mask_phone(to_phone)}: {otp} (SMS not configured)")
            return {"success": True, "delivered": False}

        result = await self.send_message(
            to_phone,
            MSG_OTP_SMS.format(otp=otp, minutes=expiry_minutes)
        )
        result["delivered"] = result.get("success", False)
        return result


_sms_service: Optional[SMSService] = None


def get_sms_service() -> SMSService:
    """Get or create the global SMS service instance."""
    global _sms_service
    if _sms_service is None:
        _sms_service = SMSService()
    return _sms_service
