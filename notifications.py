# notifications.py
"""Avisos de reservas: webhook externo y correo al admin. Nunca lanzan."""
import requests
from flask import current_app

from email_service import booking_email_html, enviar_email_admin


def notify_booking(payload) -> bool:
    """POST JSON al webhook de reservas. Devuelve True si respondió 2xx."""
    url = current_app.config.get("BOOKING_WEBHOOK_URL")
    if not url:
        current_app.logger.warning("BOOKING_WEBHOOK_URL no configurada, se omite el aviso")
        return False

    timeout = current_app.config.get("BOOKING_WEBHOOK_TIMEOUT", 10)
    try:
        resp = requests.post(url, json=payload, timeout=timeout)
        resp.raise_for_status()
        return True
    except Exception as e:
        current_app.logger.error("Error enviando la reserva al webhook: %s", e)
        return False


def email_booking(payload) -> bool:
    if not current_app.config.get("RESEND_API_KEY"):
        return False
    result = enviar_email_admin(
        f"Nueva reserva: {payload.get('tourTitle') or 'Tour privado'}",
        booking_email_html(payload),
    )
    return result is not None


def send_booking_notifications(payload):
    """Webhook y correo. Devuelve {"webhook": bool, "email": bool}."""
    return {
        "webhook": notify_booking(payload),
        "email": email_booking(payload),
    }
