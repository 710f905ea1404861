# routes/booking_routes.py
from datetime import datetime, timezone

from flask import Blueprint, request, jsonify, current_app
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from booking import (
    BookingFlow,
    BookingForm,
    PrivateBookingRequest,
    estimated_total,
    extras_subtotal,
    paquete_as_option,
    per_person_price,
    validate_booking_form,
    webhook_payload,
)
from content import booking_confirmation
from extensions import db
from mappers import map_private_tour, map_tour, whatsapp_number
from models import (
    BookingStatus,
    MeetingPoint,
    Paquete,
    PrivateTour,
    PrivateTourBooking,
    SiteSettings,
)
from notifications import send_booking_notifications

booking_bp = Blueprint("booking", __name__)

CONFIRMATION_PATH = "/private-tour/booking-confirmation"


def _validation_message(err: ValidationError):
    return "; ".join(
        f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in err.errors()
    )


def _business_number():
    fallback = current_app.config["WHATSAPP_NUMBER"]
    try:
        row = SiteSettings.query.order_by(SiteSettings.id).first()
    except SQLAlchemyError as e:
        current_app.logger.error("Error leyendo el teléfono del sitio: %s", e)
        return fallback
    return whatsapp_number(row.celular if row else None, fallback)


def _addon_options(tour):
    """Paquetes ofrecidos como extras, solo si el tour los habilita."""
    if not tour.show_additional_options:
        return []
    return [paquete_as_option(p.to_dict()) for p in Paquete.query.order_by(Paquete.id).all()]


def _parse_option_ids(raw):
    ids = []
    for part in (raw or "").split(","):
        part = part.strip()
        if part.isdigit():
            ids.append(int(part))
    return ids


def _quote(tour, guests, selected_ids, options=None):
    options = _addon_options(tour) if options is None else options
    price = per_person_price(tour.to_dict(), guests)
    extras = extras_subtotal(options, selected_ids, guests)
    return {
        "price_per_person": price,
        "guests": guests,
        "extras_total": extras,
        "estimated_total": estimated_total(price, guests, extras),
    }


# ===================== RESERVA SIMPLE (WHATSAPP) =====================

@booking_bp.post("/booking/whatsapp")
def booking_whatsapp():
    """Arma el mensaje de WhatsApp de la reserva. No guarda nada."""
    data = request.get_json(silent=True) or {}
    try:
        form = BookingForm(**data)
    except ValidationError as e:
        return jsonify({"message": _validation_message(e)}), 400

    tours = [map_tour(p.to_dict()) for p in Paquete.query.order_by(Paquete.id).all()]
    errors = validate_booking_form(form, tours)
    if errors:
        return jsonify({"message": errors[0], "errors": errors}), 400

    flow = BookingFlow(tours, form)
    return jsonify({
        "message": flow.message(),
        "url": flow.whatsapp_url(_business_number()),
        "total": flow.total,
    })


# ===================== TOURS PRIVADOS =====================

@booking_bp.get("/private-tours")
def list_private_tours():
    try:
        tours = PrivateTour.query.order_by(PrivateTour.id).all()
    except SQLAlchemyError as e:
        current_app.logger.error("Error cargando tours privados: %s", e)
        tours = []
    return jsonify([map_private_tour(t.to_dict()).model_dump() for t in tours])


@booking_bp.get("/private-tours/<int:tour_id>")
def get_private_tour(tour_id):
    tour = db.session.get(PrivateTour, tour_id)
    if not tour:
        return jsonify({"message": "Tour privado no encontrado"}), 404
    return jsonify(map_private_tour(tour.to_dict()).model_dump())


@booking_bp.get("/private-tours/<int:tour_id>/options")
def private_tour_options(tour_id):
    tour = db.session.get(PrivateTour, tour_id)
    if not tour:
        return jsonify({"message": "Tour privado no encontrado"}), 404
    try:
        options = _addon_options(tour)
    except SQLAlchemyError as e:
        current_app.logger.error("Error cargando extras: %s", e)
        options = []
    return jsonify(options)


@booking_bp.get("/private-tours/<int:tour_id>/quote")
def private_tour_quote(tour_id):
    tour = db.session.get(PrivateTour, tour_id)
    if not tour:
        return jsonify({"message": "Tour privado no encontrado"}), 404
    guests = request.args.get("guests", default=1, type=int)
    if guests < 1:
        return jsonify({"message": "guests debe ser al menos 1"}), 400
    selected = _parse_option_ids(request.args.get("options"))
    return jsonify(_quote(tour, guests, selected))


@booking_bp.post("/private-tours/<int:tour_id>/bookings")
def create_private_booking(tour_id):
    tour = db.session.get(PrivateTour, tour_id)
    if not tour:
        return jsonify({"message": "Tour privado no encontrado"}), 404

    data = request.get_json(silent=True) or {}
    try:
        req = PrivateBookingRequest(**data)
    except ValidationError as e:
        return jsonify({"message": _validation_message(e)}), 400

    missing = req.missing_fields()
    if missing:
        return jsonify({
            "message": "Por favor complete todos los campos obligatorios",
            "fields": missing,
        }), 400

    tour_date = req.tour_date()
    if tour_date is None:
        return jsonify({"message": "Fecha inválida"}), 400

    booking = PrivateTourBooking(
        tour_id=tour.id,
        first_name=req.first_name,
        last_name=req.last_name,
        hometown_city=req.hometown_city,
        hometown_state=req.hometown_state,
        hometown_country=req.hometown_country,
        number_of_guests_age_5_up=req.number_of_guests_age_5_up,
        number_of_guests_under_5=req.number_of_guests_under_5,
        phone=req.phone,
        email=req.email,
        cruise_ship_or_resort_name=req.cruise_ship_or_resort_name,
        requested_tour_date=tour_date,
        selected_additional_options=req.selected_additional_options,
        comments=req.comments,
        status=BookingStatus.PENDING,
    )
    try:
        db.session.add(booking)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error("Error guardando la reserva: %s", e)
        return jsonify({"message": str(e)}), 500

    # Avisos: si fallan, la reserva ya quedó guardada
    try:
        options = _addon_options(tour)
        meeting_point = None
        if req.meeting_point_id:
            mp = db.session.get(MeetingPoint, req.meeting_point_id)
            meeting_point = mp.to_dict() if mp else None
        payload = webhook_payload(
            tour.title,
            req,
            options,
            meeting_point=meeting_point,
            submitted_at=datetime.now(timezone.utc).isoformat(),
        )
        quote = _quote(tour, req.number_of_guests_age_5_up, req.selected_additional_options, options)
        payload.update({
            "pricePerPerson": quote["price_per_person"] or 0,
            "numberOfGuests": req.number_of_guests_age_5_up,
            "extrasTotal": quote["extras_total"],
            "estimatedTotal": quote["estimated_total"],
        })
        send_booking_notifications(payload)
    except SQLAlchemyError as e:
        current_app.logger.error("Error preparando el aviso de la reserva %s: %s", booking.id, e)

    return jsonify({
        "booking": booking.to_dict(),
        "redirect": CONFIRMATION_PATH,
        "confirmation": {
            "email": req.email,
            "tour_date": req.requested_tour_date,
            "cruise_name": req.cruise_ship_or_resort_name,
        },
    }), 201


@booking_bp.get(CONFIRMATION_PATH)
def booking_confirmation_page():
    return jsonify(booking_confirmation(
        email=request.args.get("email"),
        tour_date=request.args.get("tour_date"),
        cruise_name=request.args.get("cruise_name"),
    ))
