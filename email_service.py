# email_service.py
import logging

import resend
from flask import current_app

logger = logging.getLogger(__name__)


def enviar_email(to, subject: str, html: str, from_email: str = None):
    """
    Envía un email usando Resend API.

    Args:
        to: email o lista de emails destinatarios
        subject: Asunto del correo
        html: Contenido HTML del correo
        from_email: Remitente (opcional, usa RESEND_FROM_EMAIL)

    Returns:
        dict con resultado o None si falla o no hay API key
    """
    api_key = current_app.config.get("RESEND_API_KEY")
    if not api_key:
        logger.info("RESEND_API_KEY no configurada, no se envía '%s'", subject)
        return None

    resend.api_key = api_key
    try:
        params = {
            "from": from_email or current_app.config["RESEND_FROM_EMAIL"],
            "to": to if isinstance(to, list) else [to],
            "subject": subject,
            "html": html,
        }
        result = resend.Emails.send(params)
        logger.info("Email enviado a %s", params["to"])
        return result
    except Exception as e:
        logger.error("Error enviando email: %s", e)
        return None


def enviar_email_admin(subject: str, html: str):
    """Envía un email al admin"""
    return enviar_email([current_app.config["ADMIN_EMAIL"]], subject, html)


def booking_email_html(payload) -> str:
    """Resumen en HTML de una reserva de tour privado."""
    rows = [
        ("Tour", payload.get("tourTitle")),
        ("Nombre", f"{payload.get('firstName', '')} {payload.get('lastName', '')}".strip()),
        ("Email", payload.get("email")),
        ("Teléfono", payload.get("phone")),
        ("Crucero / Resort", payload.get("cruiseShipOrResortName")),
        ("Fecha", payload.get("requestedTourDate")),
        ("Huéspedes (5+)", payload.get("numberOfGuestsAge5Up")),
        ("Menores de 5", payload.get("numberOfGuestsUnder5")),
        ("Total estimado", f"${payload.get('estimatedTotal', 0)}"),
        ("Comentarios", payload.get("comments")),
    ]
    meeting = payload.get("meetingPoint")
    if meeting:
        rows.append(("Punto de encuentro", meeting.get("title")))
    extras = payload.get("selectedAdditionalOptions") or []
    if extras:
        rows.append(("Extras", ", ".join(str(o.get("title")) for o in extras)))

    body = "".join(
        f"<tr><td><strong>{label}</strong></td><td>{value if value is not None else ''}</td></tr>"
        for label, value in rows
    )
    return f"<h2>Nueva reserva de tour privado</h2><table>{body}</table>"
