# models.py
from datetime import datetime

from sqlalchemy import Numeric

from extensions import db


PAQUETE_IMAGE_COLUMNS = [f"imagen{i}" for i in range(1, 11)]
GALLERY_IMAGE_COLUMNS = ["portada", "imagen1", "imagen2", "imagen3", "imagen4"]
PRIVATE_TOUR_IMAGE_COLUMNS = ["image1", "image2", "image3"]
VIDEO_COLUMNS = ["video1", "video2"]
SETTINGS_IMAGE_COLUMNS = ["portada", "portada_galeria", "logo"]

# texto con un arreglo JSON (p. ej. paquetes.incluye)
JSON_TEXT = "json_text"


class BookingStatus:
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"

    ALL = (PENDING, CONFIRMED, CANCELLED)


def _num(value):
    return float(value) if value is not None else None


def _iso(value):
    return value.isoformat() if value else None


# -----------------------
# MODELOS
# -----------------------

class SiteSettings(db.Model):
    """Fila única con la marca, contacto y redes del sitio."""
    __tablename__ = "admin"

    FIELDS = {
        "nombre_web": str,
        "logo": str,
        "portada": str,
        "portada_galeria": str,
        "celular": str,
        "correo": str,
        "direccion": str,
        "facebook": str,
        "instagram": str,
        "tiktok": str,
        "video_fondo": str,
    }

    id = db.Column(db.Integer, primary_key=True)
    nombre_web = db.Column(db.String(255))
    logo = db.Column(db.Text)
    portada = db.Column(db.Text)
    portada_galeria = db.Column(db.Text)
    celular = db.Column(db.String(50))
    correo = db.Column(db.String(255))
    direccion = db.Column(db.Text)
    facebook = db.Column(db.Text)
    instagram = db.Column(db.Text)
    tiktok = db.Column(db.Text)
    video_fondo = db.Column(db.Text)

    def to_dict(self):
        return {
            "id": self.id,
            "nombre_web": self.nombre_web,
            "logo": self.logo,
            "portada": self.portada,
            "portada_galeria": self.portada_galeria,
            "celular": self.celular,
            "correo": self.correo,
            "direccion": self.direccion,
            "facebook": self.facebook,
            "instagram": self.instagram,
            "tiktok": self.tiktok,
            "video_fondo": self.video_fondo,
        }


class Paquete(db.Model):
    __tablename__ = "paquetes"

    FIELDS = {
        "titulo": str,
        "descripcion": str,
        "precio_por_persona": float,
        "price": float,
        "duracion": str,
        "incluye": JSON_TEXT,
        "categoria": str,
        "max_personas": int,
        **{col: str for col in PAQUETE_IMAGE_COLUMNS},
    }

    id = db.Column(db.Integer, primary_key=True)
    titulo = db.Column(db.String(255), nullable=False)
    descripcion = db.Column(db.Text)
    precio_por_persona = db.Column(Numeric(10, 2))
    price = db.Column(Numeric(10, 2))
    imagen1 = db.Column(db.Text)
    imagen2 = db.Column(db.Text)
    imagen3 = db.Column(db.Text)
    imagen4 = db.Column(db.Text)
    imagen5 = db.Column(db.Text)
    imagen6 = db.Column(db.Text)
    imagen7 = db.Column(db.Text)
    imagen8 = db.Column(db.Text)
    imagen9 = db.Column(db.Text)
    imagen10 = db.Column(db.Text)
    duracion = db.Column(db.String(100))
    incluye = db.Column(db.Text)  # lista JSON guardada como texto
    categoria = db.Column(db.String(50))
    max_personas = db.Column(db.Integer)
    created_at = db.Column(db.DateTime(timezone=True), default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "titulo": self.titulo,
            "descripcion": self.descripcion,
            "precio_por_persona": _num(self.precio_por_persona),
            "price": _num(self.price),
            **{col: getattr(self, col) for col in PAQUETE_IMAGE_COLUMNS},
            "duracion": self.duracion,
            "incluye": self.incluye,
            "categoria": self.categoria,
            "max_personas": self.max_personas,
            "created_at": _iso(self.created_at),
        }


class GalleryCard(db.Model):
    __tablename__ = "gallery"

    FIELDS = {
        "title": str,
        "description": str,
        "category": str,
        **{col: str for col in GALLERY_IMAGE_COLUMNS},
    }

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255))
    description = db.Column(db.Text)
    category = db.Column(db.String(50))
    portada = db.Column(db.Text)
    imagen1 = db.Column(db.Text)
    imagen2 = db.Column(db.Text)
    imagen3 = db.Column(db.Text)
    imagen4 = db.Column(db.Text)
    created_at = db.Column(db.DateTime(timezone=True), default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            **{col: getattr(self, col) for col in GALLERY_IMAGE_COLUMNS},
            "created_at": _iso(self.created_at),
        }


class VideoSet(db.Model):
    """Fila única con los dos videos del home."""
    __tablename__ = "videos"

    FIELDS = {"video1": str, "video2": str}

    id = db.Column(db.Integer, primary_key=True)
    video1 = db.Column(db.Text)
    video2 = db.Column(db.Text)
    created_at = db.Column(db.DateTime(timezone=True), default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    def to_dict(self):
        return {
            "id": self.id,
            "video1": self.video1,
            "video2": self.video2,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class MeetingPoint(db.Model):
    __tablename__ = "meeting_points"

    FIELDS = {
        "title": str,
        "zone": str,
        "instructions": str,
        "map_url": str,
        "is_active": bool,
    }

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    zone = db.Column(db.String(100))
    instructions = db.Column(db.Text)
    map_url = db.Column(db.Text)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime(timezone=True), default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "zone": self.zone,
            "instructions": self.instructions,
            "map_url": self.map_url,
            "is_active": self.is_active,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class PrivateTour(db.Model):
    __tablename__ = "private_tours"

    FIELDS = {
        "title": str,
        "summary": str,
        "description": str,
        "price_1_person": float,
        "price_2_persons": float,
        "price_3_persons": float,
        "price_4_persons": float,
        "price_children_under_5": float,
        "whats_included": str,
        "duration": str,
        "tour_notes": str,
        "show_additional_options": bool,
        "available_days": list,
        "activity_1": str,
        "activity_2": str,
        "activity_3": str,
        "activity_4": str,
        **{col: str for col in PRIVATE_TOUR_IMAGE_COLUMNS},
    }

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    summary = db.Column(db.Text)
    description = db.Column(db.Text)
    image1 = db.Column(db.Text)
    image2 = db.Column(db.Text)
    image3 = db.Column(db.Text)
    price_1_person = db.Column(Numeric(10, 2))
    price_2_persons = db.Column(Numeric(10, 2))
    price_3_persons = db.Column(Numeric(10, 2))
    price_4_persons = db.Column(Numeric(10, 2))
    price_children_under_5 = db.Column(Numeric(10, 2))
    whats_included = db.Column(db.Text)
    duration = db.Column(db.String(100))
    tour_notes = db.Column(db.Text)
    show_additional_options = db.Column(db.Boolean, nullable=False, default=False)
    available_days = db.Column(db.JSON)
    activity_1 = db.Column(db.Text)
    activity_2 = db.Column(db.Text)
    activity_3 = db.Column(db.Text)
    activity_4 = db.Column(db.Text)

    bookings = db.relationship("PrivateTourBooking", backref="tour", lazy=True)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "description": self.description,
            **{col: getattr(self, col) for col in PRIVATE_TOUR_IMAGE_COLUMNS},
            "price_1_person": _num(self.price_1_person),
            "price_2_persons": _num(self.price_2_persons),
            "price_3_persons": _num(self.price_3_persons),
            "price_4_persons": _num(self.price_4_persons),
            "price_children_under_5": _num(self.price_children_under_5),
            "whats_included": self.whats_included,
            "duration": self.duration,
            "tour_notes": self.tour_notes,
            "show_additional_options": self.show_additional_options,
            "available_days": self.available_days or [],
            "activity_1": self.activity_1,
            "activity_2": self.activity_2,
            "activity_3": self.activity_3,
            "activity_4": self.activity_4,
        }


class PrivateTourBooking(db.Model):
    __tablename__ = "private_tour_bookings"

    id = db.Column(db.Integer, primary_key=True)
    tour_id = db.Column(
        db.Integer,
        db.ForeignKey("private_tours.id", ondelete="SET NULL"),
    )
    first_name = db.Column(db.String(150), nullable=False)
    last_name = db.Column(db.String(150), nullable=False)
    hometown_city = db.Column(db.String(150))
    hometown_state = db.Column(db.String(150))
    hometown_country = db.Column(db.String(150))
    number_of_guests_age_5_up = db.Column(db.Integer, nullable=False, default=1)
    number_of_guests_under_5 = db.Column(db.Integer, nullable=False, default=0)
    phone = db.Column(db.String(50))
    email = db.Column(db.String(255), nullable=False)
    cruise_ship_or_resort_name = db.Column(db.String(255))
    requested_tour_date = db.Column(db.Date)
    selected_additional_options = db.Column(db.JSON)
    comments = db.Column(db.Text)
    status = db.Column(db.String(20), nullable=False, default=BookingStatus.PENDING)
    created_at = db.Column(db.DateTime(timezone=True), default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "tour_id": self.tour_id,
            "tour_title": self.tour.title if self.tour else None,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "hometown_city": self.hometown_city,
            "hometown_state": self.hometown_state,
            "hometown_country": self.hometown_country,
            "number_of_guests_age_5_up": self.number_of_guests_age_5_up,
            "number_of_guests_under_5": self.number_of_guests_under_5,
            "phone": self.phone,
            "email": self.email,
            "cruise_ship_or_resort_name": self.cruise_ship_or_resort_name,
            "requested_tour_date": _iso(self.requested_tour_date),
            "selected_additional_options": self.selected_additional_options or [],
            "comments": self.comments,
            "status": self.status,
            "created_at": _iso(self.created_at),
        }


class AdditionalOption(db.Model):
    __tablename__ = "tour_additional_options"

    FIELDS = {
        "title": str,
        "subtitle": str,
        "features": str,
        "sort_order": int,
    }

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    subtitle = db.Column(db.Text)
    features = db.Column(db.Text)
    sort_order = db.Column(db.Integer, default=0)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "subtitle": self.subtitle,
            "features": self.features,
            "sort_order": self.sort_order,
        }


class AdminCredential(db.Model):
    __tablename__ = "admins"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(100), nullable=False, unique=True)
    password_hash = db.Column(db.String(255))

    def to_dict(self):
        return {"id": self.id, "username": self.username}
