# booking.py
"""
Lógica de reservas.

- Flujo simple: formulario de 3 pasos que termina en un mensaje de WhatsApp.
  No se guarda nada en la base de datos.
- Tours privados: precio por persona según cantidad de huéspedes, extras
  y total estimado.
"""
from datetime import date, timedelta
from typing import Any, ClassVar, Dict, Iterable, List, Optional, Tuple
from urllib.parse import quote

from pydantic import BaseModel, Field, field_validator

from mappers import resolve_price, _to_float

MIN_STEP = 1
MAX_STEP = 3
MAX_PEOPLE = 10


def format_amount(value) -> str:
    """45.0 -> '45', 12.5 -> '12.50'"""
    value = float(value or 0)
    if value == int(value):
        return str(int(value))
    return f"{value:.2f}"


# ===================== FLUJO SIMPLE =====================

class BookingForm(BaseModel):
    tour_id: Optional[str] = None
    date: str = ""
    number_of_people: int = 1
    full_name: str = ""
    email: str = ""
    phone: str = ""
    special_requests: str = ""

    @field_validator("tour_id", mode="before")
    @classmethod
    def _tour_id_as_str(cls, value):
        return None if value in (None, "") else str(value)


class BookingFlow:
    """Estado del modal de reserva: paso actual, tour elegido y total."""

    def __init__(self, tours, form: Optional[BookingForm] = None):
        # tours: lista de TourView
        self.tours = list(tours or [])
        self.form = form or BookingForm()
        self.step = MIN_STEP

    def next(self):
        self.step = min(self.step + 1, MAX_STEP)
        return self.step

    def back(self):
        self.step = max(self.step - 1, MIN_STEP)
        return self.step

    @property
    def selected_tour(self):
        if not self.form.tour_id:
            return None
        for tour in self.tours:
            if str(tour.id) == str(self.form.tour_id):
                return tour
        return None

    @property
    def unit_price(self) -> float:
        tour = self.selected_tour
        if not tour:
            return 0.0
        return float(tour.person_price or tour.price or 0)

    @property
    def total(self) -> float:
        if not self.selected_tour:
            return 0.0
        return self.unit_price * int(self.form.number_of_people or 0)

    @property
    def can_confirm(self) -> bool:
        return self.selected_tour is not None

    @staticmethod
    def min_date(today: Optional[date] = None) -> date:
        today = today or date.today()
        return today + timedelta(days=1)

    def message(self) -> str:
        tour = self.selected_tour
        f = self.form
        lines = [
            "¡Hola! Me gustaría reservar un tour.",
            "",
            f"Tour: {tour.name if tour else ''}",
            f"Fecha: {f.date}",
            f"Personas: {f.number_of_people}",
            f"Precio por persona: ${format_amount(self.unit_price)}",
            f"Total: ${format_amount(self.total)}",
            f"Nombre: {f.full_name}",
            f"Email: {f.email}",
            f"Teléfono: {f.phone}",
        ]
        if f.special_requests:
            lines.append(f"Solicitudes especiales: {f.special_requests}")
        return "\n".join(lines) + "\n"

    def whatsapp_url(self, number: str) -> str:
        return f"https://wa.me/{number}?text={quote(self.message(), safe='')}"


def validate_booking_form(form: BookingForm, tours, today: Optional[date] = None) -> List[str]:
    """Devuelve la lista de errores; vacía si el formulario es válido."""
    errors = []
    flow = BookingFlow(tours, form)
    if not flow.selected_tour:
        errors.append("Tour no encontrado")

    try:
        requested = date.fromisoformat(form.date)
    except (TypeError, ValueError):
        errors.append("Fecha inválida")
    else:
        if requested < BookingFlow.min_date(today):
            errors.append("La fecha debe ser a partir de mañana")

    if not 1 <= int(form.number_of_people or 0) <= MAX_PEOPLE:
        errors.append(f"El número de personas debe estar entre 1 y {MAX_PEOPLE}")

    for field in ("full_name", "email", "phone"):
        if not (getattr(form, field) or "").strip():
            errors.append(f"Falta el campo {field}")
    return errors


# ===================== TOURS PRIVADOS =====================

_TIER_COLUMNS = {
    1: "price_1_person",
    2: "price_2_persons",
    3: "price_3_persons",
}


def per_person_price(tour_row: Optional[Dict[str, Any]], guests) -> Optional[float]:
    """
    Precio por persona según huéspedes de 5 años en adelante.
    Tiers de 1, 2, 3 y 4+; si el tier no tiene precio se usa price_1_person
    y luego price_4_persons. Las filas de paquetes usan su precio normal.
    """
    if not tour_row:
        return None
    try:
        guests = int(guests or 1)
    except (TypeError, ValueError):
        guests = 1

    is_private = any(col in tour_row for col in (*_TIER_COLUMNS.values(), "price_4_persons"))
    if is_private:
        column = _TIER_COLUMNS.get(guests, "price_4_persons") if guests >= 1 else "price_1_person"
        for col in (column, "price_1_person", "price_4_persons"):
            value = _to_float(tour_row.get(col))
            if value is not None:
                return value

    if tour_row.get("precio_por_persona") is not None or tour_row.get("price") is not None:
        return resolve_price(tour_row)
    return None


def extras_subtotal(options: Iterable[Dict[str, Any]], selected_ids, guests) -> float:
    """Suma del precio por persona de los extras elegidos, por huésped."""
    selected = {str(i) for i in (selected_ids or [])}
    try:
        guests = int(guests or 1)
    except (TypeError, ValueError):
        guests = 1
    per_person = sum(
        _to_float(opt.get("price")) or 0
        for opt in (options or [])
        if str(opt.get("id")) in selected
    )
    return per_person * guests


def estimated_total(price: Optional[float], guests, extras: float = 0) -> float:
    try:
        guests = int(guests or 1)
    except (TypeError, ValueError):
        guests = 1
    return (price or 0) * guests + (extras or 0)


def paquete_as_option(row: Dict[str, Any]) -> Dict[str, Any]:
    """Un paquete ofrecido como extra de un tour privado."""
    images = [row.get(f"imagen{i}") for i in range(1, 11)]
    return {
        "id": row.get("id"),
        "title": row.get("titulo") or f"Tour {row.get('id')}",
        "image": next((img for img in images if img), ""),
        "price": resolve_price(row),
        "duration": row.get("duracion") or "",
        "description": row.get("descripcion") or "",
    }


class PrivateBookingRequest(BaseModel):
    first_name: str = ""
    last_name: str = ""
    hometown_city: str = ""
    hometown_state: str = ""
    hometown_country: str = ""
    number_of_guests_age_5_up: int = 0
    number_of_guests_under_5: int = 0
    phone: str = ""
    email: str = ""
    cruise_ship_or_resort_name: str = ""
    requested_tour_date: str = ""
    comments: str = ""
    selected_additional_options: List[int] = Field(default_factory=list)
    meeting_point_id: Optional[int] = None

    REQUIRED: ClassVar[Tuple[str, ...]] = (
        "first_name",
        "last_name",
        "hometown_city",
        "hometown_state",
        "hometown_country",
        "phone",
        "email",
        "cruise_ship_or_resort_name",
        "requested_tour_date",
        "comments",
    )

    def missing_fields(self) -> List[str]:
        missing = [f for f in self.REQUIRED if not (getattr(self, f) or "").strip()]
        if self.number_of_guests_age_5_up < 1:
            missing.append("number_of_guests_age_5_up")
        if self.number_of_guests_under_5 < 0:
            missing.append("number_of_guests_under_5")
        return missing

    def tour_date(self) -> Optional[date]:
        try:
            return date.fromisoformat(self.requested_tour_date)
        except (TypeError, ValueError):
            return None


def webhook_payload(tour_title, req: PrivateBookingRequest, options, meeting_point=None,
                    submitted_at=None) -> Dict[str, Any]:
    """Datos que se envían al webhook para el correo de notificación."""
    selected = {str(i) for i in req.selected_additional_options}
    chosen = [opt for opt in (options or []) if str(opt.get("id")) in selected]
    return {
        "tourTitle": tour_title,
        "firstName": req.first_name,
        "lastName": req.last_name,
        "hometownCity": req.hometown_city,
        "hometownState": req.hometown_state,
        "hometownCountry": req.hometown_country,
        "numberOfGuestsAge5Up": req.number_of_guests_age_5_up,
        "numberOfGuestsUnder5": req.number_of_guests_under_5,
        "phone": req.phone,
        "email": req.email,
        "cruiseShipOrResortName": req.cruise_ship_or_resort_name,
        "requestedTourDate": req.requested_tour_date or "",
        "selectedAdditionalOptions": chosen,
        "comments": req.comments,
        "meetingPoint": (
            {
                "title": meeting_point.get("title"),
                "zone": meeting_point.get("zone"),
                "instructions": meeting_point.get("instructions"),
                "mapUrl": meeting_point.get("map_url"),
            }
            if meeting_point
            else None
        ),
        "submittedAt": submitted_at,
    }
