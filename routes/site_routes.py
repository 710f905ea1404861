# routes/site_routes.py
from collections import Counter
from urllib.parse import quote

from flask import Blueprint, request, jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError

from content import BUSINESS_HOURS, CONTACT_WHATSAPP_MESSAGE, DEFAULT_PHONE, cancellation_policy
from extensions import db
from mappers import (
    map_gallery_item,
    map_site_settings,
    map_tour,
    map_videos,
)
from models import GalleryCard, MeetingPoint, Paquete, SiteSettings, VideoSet
from sheets import get_experiences
from translations import (
    LANGUAGE_COOKIE,
    SUPPORTED_LANGUAGES,
    get_translations,
    resolve_language,
)

site_bp = Blueprint("site", __name__)

LANGUAGE_COOKIE_MAX_AGE = 365 * 24 * 60 * 60


def _settings_row():
    row = SiteSettings.query.order_by(SiteSettings.id).first()
    return row.to_dict() if row else None


def _site_view():
    row = _settings_row()
    return map_site_settings(row, current_app.config["WHATSAPP_NUMBER"]) if row else None


def _load_tours(category=None):
    query = Paquete.query
    if category:
        query = query.filter(Paquete.categoria == category)
    return [map_tour(p.to_dict()) for p in query.order_by(Paquete.id).all()]


# ===================== SITIO =====================

@site_bp.get("/site")
def get_site():
    try:
        site = _site_view()
    except SQLAlchemyError as e:
        current_app.logger.error("Error cargando la configuración del sitio: %s", e)
        site = None
    return jsonify(site.model_dump() if site else None)


@site_bp.get("/contact")
def get_contact():
    try:
        site = _site_view()
    except SQLAlchemyError as e:
        current_app.logger.error("Error cargando datos de contacto: %s", e)
        site = None
    if site is None:
        site = map_site_settings(None, current_app.config["WHATSAPP_NUMBER"])

    return jsonify({
        "phone": site.phone or DEFAULT_PHONE,
        "email": site.email,
        "address": site.address,
        "social": site.social,
        "whatsapp_url": f"{site.whatsapp_url}?text={quote(CONTACT_WHATSAPP_MESSAGE, safe='')}",
        "business_hours": BUSINESS_HOURS,
    })


@site_bp.get("/cancellation-policy")
def get_cancellation_policy():
    try:
        row = _settings_row()
    except SQLAlchemyError as e:
        current_app.logger.error("Error cargando el correo de contacto: %s", e)
        row = None
    return jsonify(cancellation_policy((row or {}).get("correo")))


# ===================== TOURS =====================

@site_bp.get("/tours")
def list_tours():
    category = request.args.get("category")
    try:
        tours = _load_tours(category)
    except SQLAlchemyError as e:
        current_app.logger.error("Error cargando tours: %s", e)
        tours = []
    return jsonify([t.model_dump() for t in tours])


@site_bp.get("/tours/marquee")
def tours_marquee():
    """Tarjetas para el marquee del home, en orden de id."""
    try:
        tours = _load_tours()
    except SQLAlchemyError as e:
        current_app.logger.error("Error cargando tours para el marquee: %s", e)
        tours = []
    return jsonify([
        {
            "id": t.id,
            "name": t.name,
            "image": t.image,
            "price": t.person_price,
            "duration": t.duration,
            "badge": t.badge,
        }
        for t in tours
    ])


@site_bp.get("/tours/<key>")
def get_tour(key):
    """Busca primero por id numérico y luego por título exacto."""
    row = None
    if key.isdigit():
        row = db.session.get(Paquete, int(key))
    if row is None:
        row = Paquete.query.filter_by(titulo=key).first()
    if row is None:
        return jsonify({"message": "Tour no encontrado"}), 404
    return jsonify(map_tour(row.to_dict()).model_dump())


# ===================== GALERÍA Y VIDEOS =====================

@site_bp.get("/gallery")
def list_gallery():
    category = request.args.get("category")
    limit = request.args.get("limit", type=int)

    try:
        rows = GalleryCard.query.order_by(
            GalleryCard.created_at.desc(), GalleryCard.id.desc()
        ).all()
    except SQLAlchemyError as e:
        current_app.logger.error("Error cargando la galería: %s", e)
        rows = []

    items = [map_gallery_item(r.to_dict()) for r in rows]
    counts = Counter(item.category for item in items)

    if category and category != "all":
        items = [item for item in items if item.category == category]
    if limit and limit > 0:
        items = items[:limit]

    return jsonify({
        "items": [item.model_dump() for item in items],
        "counts": {"all": sum(counts.values()), **counts},
    })


@site_bp.get("/videos")
def list_videos():
    try:
        row = VideoSet.query.order_by(VideoSet.id).first()
        videos = map_videos(row.to_dict() if row else None)
    except SQLAlchemyError as e:
        current_app.logger.error("Error cargando videos: %s", e)
        videos = []
    return jsonify(videos)


# ===================== PUNTOS DE ENCUENTRO / EXPERIENCIAS =====================

@site_bp.get("/meeting-points")
def list_meeting_points():
    try:
        points = (
            MeetingPoint.query.filter_by(is_active=True)
            .order_by(MeetingPoint.id)
            .all()
        )
    except SQLAlchemyError as e:
        current_app.logger.error("Error cargando puntos de encuentro: %s", e)
        points = []
    return jsonify([p.to_dict() for p in points])


@site_bp.get("/experiences")
def list_experiences():
    return jsonify([e.model_dump() for e in get_experiences()])


# ===================== IDIOMA =====================

@site_bp.get("/i18n")
def get_i18n():
    language = resolve_language(request)
    return jsonify({
        "language": language,
        "translations": get_translations(language),
    })


@site_bp.post("/i18n/language")
def set_language():
    data = request.get_json(silent=True) or {}
    language = data.get("language")
    if language not in SUPPORTED_LANGUAGES:
        return jsonify({"message": "Idioma no soportado"}), 400

    resp = jsonify({"language": language})
    resp.set_cookie(
        LANGUAGE_COOKIE,
        language,
        max_age=LANGUAGE_COOKIE_MAX_AGE,
        samesite="Lax",
    )
    return resp
