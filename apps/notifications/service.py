"""
Notification service.
SMS through the HTTP gateway at SMS_GATEWAY_URL; email through the log until a
provider is wired.
"""

import logging
import requests
from django.conf import settings

logger = logging.getLogger("cementops.notifications")


class NotificationService:
    """Send SMS and Email notifications. Fails silently — never blocks the main flow."""

    def send_sms(self, phone: str, message: str) -> bool:
        """Send SMS via gateway. Returns True on success."""
        if not phone:
            return False
        try:
            resp = requests.post(
                f"{settings.SMS_GATEWAY_URL}/send",
                json={"phone": phone, "message": message},
                timeout=3,
            )
            if resp.status_code == 200:
                logger.info("SMS sent to %s", phone)
                return True
            logger.warning("SMS gateway returned %s for %s", resp.status_code, phone)
        except requests.RequestException as exc:
            logger.warning("SMS failed for %s: %s", phone, exc)
        return False

    def send_email(self, email: str, subject: str, body: str) -> bool:
        logger.info("EMAIL → %s | Subject: %s", email, subject)
        return True

    def send_delivery_otp(self, order) -> bool:
        """Text the customer the code they hand to the driver at the drop site."""
        customer = order.customer
        plate = order.truck.plate_number if order.truck_id else "our truck"
        message = (
            f"{settings.COMPANY_NAME[:30]}: order {order.order_number} "
            f"({order.quantity} {order.unit} {order.cement_type}) is on the way on {plate}. "
            f"Give delivery code {order.delivery_otp} to the driver only after offloading."
        )
        return self.send_sms(customer.phone, message)

    def broadcast_to_drivers(self, message: str) -> int:
        """Send SMS to all active drivers. Returns count sent."""
        from apps.fleet.models import Driver
        drivers = Driver.objects.filter(is_active=True).exclude(phone="")
        sent = 0
        for driver in drivers:
            if self.send_sms(driver.phone, message):
                sent += 1
        logger.info("Broadcast sent to %d drivers", sent)
        return sent
