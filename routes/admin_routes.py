# routes/admin_routes.py
import json

from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from sqlalchemy.exc import SQLAlchemyError

from extensions import db, bcrypt
from models import (
    AdditionalOption,
    AdminCredential,
    BookingStatus,
    JSON_TEXT,
    GalleryCard,
    GALLERY_IMAGE_COLUMNS,
    MeetingPoint,
    Paquete,
    PAQUETE_IMAGE_COLUMNS,
    PrivateTour,
    PrivateTourBooking,
    PRIVATE_TOUR_IMAGE_COLUMNS,
    SETTINGS_IMAGE_COLUMNS,
    SiteSettings,
    VideoSet,
    VIDEO_COLUMNS,
)
from routes.auth_routes import current_admin
from storage import (
    GALLERY_BUCKET,
    IMAGE_EXTENSIONS,
    PAQUETES_BUCKET,
    PRINCIPAL_BUCKET,
    VIDEO_EXTENSIONS,
    PendingBlobs,
    StorageError,
    allowed_file,
    get_bucket,
    remove_url,
)

admin_bp = Blueprint("admin", __name__, url_prefix="/admin")

READ_ONLY_FIELDS = {"id", "created_at", "updated_at"}
TRUE_VALUES = {"true", "1", "on", "yes"}
FALSE_VALUES = {"false", "0", "off", "no", ""}


class FieldError(ValueError):
    pass


# --------------- Helpers de auth / admin -------------------

def _require_admin():
    admin = current_admin()
    if not admin:
        return None, (jsonify({"message": "No autorizado"}), 403)
    return admin, None


# --------------- Helpers de datos -------------------

def _payload():
    """JSON o multipart (los archivos van aparte en request.files)."""
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()


def _coerce(field, value, type_):
    if value is None:
        return None
    try:
        if type_ is bool:
            if isinstance(value, bool):
                return value
            text = str(value).strip().lower()
            if text in TRUE_VALUES:
                return True
            if text in FALSE_VALUES:
                return False
            raise ValueError(value)
        if type_ is list:
            if isinstance(value, str):
                value = json.loads(value) if value.strip() else []
            if not isinstance(value, list):
                raise ValueError(value)
            return value
        if type_ == JSON_TEXT:
            if isinstance(value, str):
                if not value.strip():
                    return None
                if not isinstance(json.loads(value), list):
                    raise ValueError(value)
                return value
            if not isinstance(value, list):
                raise ValueError(value)
            return json.dumps(value, ensure_ascii=False)
        if value == "":
            return None
        if type_ is int:
            return int(float(value))
        return type_(value)
    except (TypeError, ValueError) as e:
        raise FieldError(f"Valor inválido para {field}: {value!r}") from e


def _apply_fields(obj, data):
    """Copia los campos editables del modelo. Un campo desconocido es un error."""
    fields = type(obj).FIELDS
    unknown = [k for k in data if k not in fields and k not in READ_ONLY_FIELDS]
    if unknown:
        raise FieldError(f"Campos desconocidos: {', '.join(sorted(unknown))}")
    for key, value in data.items():
        if key in READ_ONLY_FIELDS:
            continue
        setattr(obj, key, _coerce(key, value, fields[key]))


def _files_for(slots, extensions):
    files = {}
    for slot in slots:
        file = request.files.get(slot)
        if not file or not file.filename:
            continue
        if not allowed_file(file.filename, extensions):
            raise FieldError(f"Tipo de archivo no permitido: {file.filename}")
        files[slot] = file
    return files


def _save(obj, bucket_name=None, folder="", slots=(), extensions=IMAGE_EXTENSIONS,
          required=(), is_new=False):
    """
    Aplica el payload, sube los archivos de los slots y guarda la fila.
    Devuelve (obj, None) o (None, respuesta_de_error).
    """
    before = {slot: getattr(obj, slot) for slot in slots}
    try:
        _apply_fields(obj, _payload())
        files = _files_for(slots, extensions)
    except FieldError as e:
        db.session.rollback()
        return None, (jsonify({"message": str(e)}), 400)

    missing = [f for f in required if getattr(obj, f) in (None, "")]
    if missing:
        db.session.rollback()
        return None, (jsonify({"message": f"Faltan campos obligatorios: {', '.join(missing)}"}), 400)

    pending = PendingBlobs(get_bucket(bucket_name)) if bucket_name else None
    try:
        for slot, file in files.items():
            url = pending.put(folder, slot, file, previous_url=before[slot])
            setattr(obj, slot, url)
        for slot, previous in before.items():
            if pending and previous and slot not in files and getattr(obj, slot) != previous:
                pending.drop(previous)
        if is_new:
            db.session.add(obj)
        db.session.commit()
    except (StorageError, SQLAlchemyError) as e:
        db.session.rollback()
        if pending:
            pending.discard()
        current_app.logger.error("Error guardando %s: %s", type(obj).__name__, e)
        return None, (jsonify({"message": str(e)}), 500)

    if pending:
        pending.finalize()
    return obj, None


def _delete(obj, bucket_name=None, slots=()):
    """Borra un blob por slot con valor (un fallo no detiene el borrado) y la fila."""
    if bucket_name:
        bucket = get_bucket(bucket_name)
        for slot in slots:
            url = getattr(obj, slot)
            if url:
                remove_url(bucket, url)
    try:
        db.session.delete(obj)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error("Error eliminando %s: %s", type(obj).__name__, e)
        return jsonify({"message": str(e)}), 500
    return None


def _get_or_404(model, obj_id, label):
    obj = db.session.get(model, obj_id)
    if not obj:
        return None, (jsonify({"message": f"{label} no encontrado"}), 404)
    return obj, None


# ================== DASHBOARD =====================

@admin_bp.get("/dashboard")
@jwt_required()
def admin_dashboard():
    _, error = _require_admin()
    if error:
        return error

    bookings = {
        status: PrivateTourBooking.query.filter_by(status=status).count()
        for status in BookingStatus.ALL
    }
    return jsonify({
        "tours": Paquete.query.count(),
        "gallery": GalleryCard.query.count(),
        "meeting_points": MeetingPoint.query.count(),
        "meeting_points_activos": MeetingPoint.query.filter_by(is_active=True).count(),
        "private_tours": PrivateTour.query.count(),
        "additional_options": AdditionalOption.query.count(),
        "private_tour_bookings": sum(bookings.values()),
        "bookings_estado": bookings,
    })


# ================== TOURS (PAQUETES) =====================

@admin_bp.get("/tours")
@jwt_required()
def admin_list_tours():
    _, error = _require_admin()
    if error:
        return error

    tours = Paquete.query.order_by(Paquete.id.desc()).all()
    return jsonify([t.to_dict() for t in tours])


@admin_bp.post("/tours")
@jwt_required()
def admin_create_tour():
    _, error = _require_admin()
    if error:
        return error

    tour, error = _save(
        Paquete(),
        bucket_name=PAQUETES_BUCKET,
        folder="paquetes",
        slots=PAQUETE_IMAGE_COLUMNS,
        required=("titulo",),
        is_new=True,
    )
    if error:
        return error
    return jsonify({"message": "Tour creado", "tour": tour.to_dict()}), 201


@admin_bp.put("/tours/<int:tour_id>")
@jwt_required()
def admin_update_tour(tour_id):
    _, error = _require_admin()
    if error:
        return error

    tour, error = _get_or_404(Paquete, tour_id, "Tour")
    if error:
        return error

    tour, error = _save(
        tour,
        bucket_name=PAQUETES_BUCKET,
        folder="paquetes",
        slots=PAQUETE_IMAGE_COLUMNS,
        required=("titulo",),
    )
    if error:
        return error
    return jsonify({"message": "Tour actualizado", "tour": tour.to_dict()})


@admin_bp.delete("/tours/<int:tour_id>")
@jwt_required()
def admin_delete_tour(tour_id):
    _, error = _require_admin()
    if error:
        return error

    tour, error = _get_or_404(Paquete, tour_id, "Tour")
    if error:
        return error

    error = _delete(tour, PAQUETES_BUCKET, PAQUETE_IMAGE_COLUMNS)
    if error:
        return error
    return jsonify({"message": "Tour eliminado"})


# ================== GALERÍA =====================

@admin_bp.get("/gallery")
@jwt_required()
def admin_list_gallery():
    _, error = _require_admin()
    if error:
        return error

    cards = GalleryCard.query.order_by(GalleryCard.created_at.desc(), GalleryCard.id.desc()).all()
    return jsonify([c.to_dict() for c in cards])


@admin_bp.post("/gallery")
@jwt_required()
def admin_create_gallery():
    _, error = _require_admin()
    if error:
        return error

    card, error = _save(
        GalleryCard(),
        bucket_name=GALLERY_BUCKET,
        folder="gallery",
        slots=GALLERY_IMAGE_COLUMNS,
        is_new=True,
    )
    if error:
        return error
    return jsonify({"message": "Tarjeta creada", "item": card.to_dict()}), 201


@admin_bp.put("/gallery/<int:card_id>")
@jwt_required()
def admin_update_gallery(card_id):
    _, error = _require_admin()
    if error:
        return error

    card, error = _get_or_404(GalleryCard, card_id, "Elemento de galería")
    if error:
        return error

    card, error = _save(
        card,
        bucket_name=GALLERY_BUCKET,
        folder="gallery",
        slots=GALLERY_IMAGE_COLUMNS,
    )
    if error:
        return error
    return jsonify({"message": "Tarjeta actualizada", "item": card.to_dict()})


@admin_bp.delete("/gallery/<int:card_id>")
@jwt_required()
def admin_delete_gallery(card_id):
    _, error = _require_admin()
    if error:
        return error

    card, error = _get_or_404(GalleryCard, card_id, "Elemento de galería")
    if error:
        return error

    error = _delete(card, GALLERY_BUCKET, GALLERY_IMAGE_COLUMNS)
    if error:
        return error
    return jsonify({"message": "Tarjeta eliminada"})


# ================== VIDEOS =====================

@admin_bp.get("/videos")
@jwt_required()
def admin_get_videos():
    _, error = _require_admin()
    if error:
        return error

    row = VideoSet.query.order_by(VideoSet.id).first()
    return jsonify(row.to_dict() if row else None)


@admin_bp.put("/videos")
@jwt_required()
def admin_save_videos():
    """Crea o actualiza la fila única de videos."""
    _, error = _require_admin()
    if error:
        return error

    row = VideoSet.query.order_by(VideoSet.id).first()
    is_new = row is None
    row, error = _save(
        row or VideoSet(),
        bucket_name=GALLERY_BUCKET,
        folder="videos",
        slots=VIDEO_COLUMNS,
        extensions=VIDEO_EXTENSIONS,
        is_new=is_new,
    )
    if error:
        return error
    return jsonify({"message": "Videos guardados", "videos": row.to_dict()}), 201 if is_new else 200


@admin_bp.delete("/videos/<slot>")
@jwt_required()
def admin_delete_video(slot):
    _, error = _require_admin()
    if error:
        return error

    if slot not in VIDEO_COLUMNS:
        return jsonify({"message": "Slot de video inválido"}), 400

    row = VideoSet.query.order_by(VideoSet.id).first()
    if not row or not getattr(row, slot):
        return jsonify({"message": "Video no encontrado"}), 404

    url = getattr(row, slot)
    setattr(row, slot, None)
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error("Error quitando %s: %s", slot, e)
        return jsonify({"message": str(e)}), 500

    remove_url(get_bucket(GALLERY_BUCKET), url)
    return jsonify({"message": "Video eliminado", "videos": row.to_dict()})


# ================== PUNTOS DE ENCUENTRO =====================

@admin_bp.get("/meeting-points")
@jwt_required()
def admin_list_meeting_points():
    _, error = _require_admin()
    if error:
        return error

    points = MeetingPoint.query.order_by(MeetingPoint.id).all()
    return jsonify([p.to_dict() for p in points])


@admin_bp.post("/meeting-points")
@jwt_required()
def admin_create_meeting_point():
    _, error = _require_admin()
    if error:
        return error

    point, error = _save(MeetingPoint(is_active=True), required=("title",), is_new=True)
    if error:
        return error
    return jsonify({"message": "Punto de encuentro creado", "meeting_point": point.to_dict()}), 201


@admin_bp.put("/meeting-points/<int:point_id>")
@jwt_required()
def admin_update_meeting_point(point_id):
    _, error = _require_admin()
    if error:
        return error

    point, error = _get_or_404(MeetingPoint, point_id, "Punto de encuentro")
    if error:
        return error

    point, error = _save(point, required=("title",))
    if error:
        return error
    return jsonify({"message": "Punto de encuentro actualizado", "meeting_point": point.to_dict()})


@admin_bp.patch("/meeting-points/<int:point_id>/toggle")
@jwt_required()
def admin_toggle_meeting_point(point_id):
    _, error = _require_admin()
    if error:
        return error

    point, error = _get_or_404(MeetingPoint, point_id, "Punto de encuentro")
    if error:
        return error

    point.is_active = not point.is_active
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error("Error cambiando estado del punto %s: %s", point_id, e)
        return jsonify({"message": str(e)}), 500
    return jsonify({"message": "Estado actualizado", "meeting_point": point.to_dict()})


@admin_bp.delete("/meeting-points/<int:point_id>")
@jwt_required()
def admin_delete_meeting_point(point_id):
    _, error = _require_admin()
    if error:
        return error

    point, error = _get_or_404(MeetingPoint, point_id, "Punto de encuentro")
    if error:
        return error

    error = _delete(point)
    if error:
        return error
    return jsonify({"message": "Punto de encuentro eliminado"})


# ================== TOURS PRIVADOS =====================

@admin_bp.get("/private-tours")
@jwt_required()
def admin_list_private_tours():
    _, error = _require_admin()
    if error:
        return error

    tours = PrivateTour.query.order_by(PrivateTour.id).all()
    return jsonify([t.to_dict() for t in tours])


@admin_bp.post("/private-tours")
@jwt_required()
def admin_create_private_tour():
    _, error = _require_admin()
    if error:
        return error

    tour, error = _save(
        PrivateTour(),
        bucket_name=GALLERY_BUCKET,
        folder="private-tours",
        slots=PRIVATE_TOUR_IMAGE_COLUMNS,
        required=("title",),
        is_new=True,
    )
    if error:
        return error
    return jsonify({"message": "Tour privado creado", "private_tour": tour.to_dict()}), 201


@admin_bp.put("/private-tours/<int:tour_id>")
@jwt_required()
def admin_update_private_tour(tour_id):
    _, error = _require_admin()
    if error:
        return error

    tour, error = _get_or_404(PrivateTour, tour_id, "Tour privado")
    if error:
        return error

    tour, error = _save(
        tour,
        bucket_name=GALLERY_BUCKET,
        folder="private-tours",
        slots=PRIVATE_TOUR_IMAGE_COLUMNS,
        required=("title",),
    )
    if error:
        return error
    return jsonify({"message": "Tour privado actualizado", "private_tour": tour.to_dict()})


@admin_bp.delete("/private-tours/<int:tour_id>")
@jwt_required()
def admin_delete_private_tour(tour_id):
    _, error = _require_admin()
    if error:
        return error

    tour, error = _get_or_404(PrivateTour, tour_id, "Tour privado")
    if error:
        return error

    error = _delete(tour, GALLERY_BUCKET, PRIVATE_TOUR_IMAGE_COLUMNS)
    if error:
        return error
    return jsonify({"message": "Tour privado eliminado"})


# ================== RESERVAS DE TOURS PRIVADOS =====================

@admin_bp.get("/private-tour-bookings")
@jwt_required()
def admin_list_private_bookings():
    _, error = _require_admin()
    if error:
        return error

    query = PrivateTourBooking.query
    status = request.args.get("status")
    if status:
        if status not in BookingStatus.ALL:
            return jsonify({"message": "Estado inválido"}), 400
        query = query.filter_by(status=status)

    bookings = query.order_by(PrivateTourBooking.created_at.desc(), PrivateTourBooking.id.desc()).all()
    return jsonify([b.to_dict() for b in bookings])


@admin_bp.patch("/private-tour-bookings/<int:booking_id>/status")
@jwt_required()
def admin_update_booking_status(booking_id):
    _, error = _require_admin()
    if error:
        return error

    booking, error = _get_or_404(PrivateTourBooking, booking_id, "Reserva")
    if error:
        return error

    data = request.get_json(silent=True) or {}
    status = data.get("status")
    if status not in BookingStatus.ALL:
        return jsonify({"message": "Estado inválido"}), 400

    booking.status = status
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error("Error actualizando la reserva %s: %s", booking_id, e)
        return jsonify({"message": str(e)}), 500
    return jsonify({"message": "Estado actualizado", "booking": booking.to_dict()})


# ================== OPCIONES ADICIONALES =====================

@admin_bp.get("/additional-options")
@jwt_required()
def admin_list_additional_options():
    _, error = _require_admin()
    if error:
        return error

    options = AdditionalOption.query.order_by(AdditionalOption.sort_order, AdditionalOption.id).all()
    return jsonify([o.to_dict() for o in options])


@admin_bp.post("/additional-options")
@jwt_required()
def admin_create_additional_option():
    _, error = _require_admin()
    if error:
        return error

    option, error = _save(AdditionalOption(sort_order=0), required=("title",), is_new=True)
    if error:
        return error
    return jsonify({"message": "Opción creada", "option": option.to_dict()}), 201


@admin_bp.put("/additional-options/<int:option_id>")
@jwt_required()
def admin_update_additional_option(option_id):
    _, error = _require_admin()
    if error:
        return error

    option, error = _get_or_404(AdditionalOption, option_id, "Opción")
    if error:
        return error

    option, error = _save(option, required=("title",))
    if error:
        return error
    return jsonify({"message": "Opción actualizada", "option": option.to_dict()})


@admin_bp.delete("/additional-options/<int:option_id>")
@jwt_required()
def admin_delete_additional_option(option_id):
    _, error = _require_admin()
    if error:
        return error

    option, error = _get_or_404(AdditionalOption, option_id, "Opción")
    if error:
        return error

    error = _delete(option)
    if error:
        return error
    return jsonify({"message": "Opción eliminada"})


# ================== CONFIGURACIÓN DEL SITIO =====================

@admin_bp.get("/settings")
@jwt_required()
def admin_get_settings():
    _, error = _require_admin()
    if error:
        return error

    row = SiteSettings.query.order_by(SiteSettings.id).first()
    return jsonify(row.to_dict() if row else None)


@admin_bp.put("/settings")
@jwt_required()
def admin_save_settings():
    _, error = _require_admin()
    if error:
        return error

    row = SiteSettings.query.order_by(SiteSettings.id).first()
    is_new = row is None
    row, error = _save(
        row or SiteSettings(),
        bucket_name=PRINCIPAL_BUCKET,
        folder="admin",
        slots=SETTINGS_IMAGE_COLUMNS,
        is_new=is_new,
    )
    if error:
        return error
    return jsonify({"message": "Configuración guardada", "settings": row.to_dict()})


# ================== CREDENCIALES =====================

@admin_bp.get("/credentials")
@jwt_required()
def admin_get_credentials():
    _, error = _require_admin()
    if error:
        return error

    cred = AdminCredential.query.order_by(AdminCredential.id).first()
    return jsonify({"username": cred.username if cred else ""})


@admin_bp.put("/credentials")
@jwt_required()
def admin_save_credentials():
    """Upsert por username. La contraseña se guarda con bcrypt."""
    _, error = _require_admin()
    if error:
        return error

    data = request.get_json(silent=True) or {}
    username = (data.get("username") or "").strip()
    password = data.get("password") or ""
    confirm = data.get("confirm_password") or ""

    if not username:
        return jsonify({"message": "Username is required"}), 400
    if password and password != confirm:
        return jsonify({"message": "Passwords do not match"}), 400

    cred = AdminCredential.query.filter_by(username=username).first()
    if cred is None:
        if not password:
            return jsonify({"message": "Password is required for a new username"}), 400
        cred = AdminCredential(username=username)
        db.session.add(cred)
    if password:
        cred.password_hash = bcrypt.generate_password_hash(password).decode("utf-8")

    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error("Error guardando credenciales: %s", e)
        return jsonify({"message": str(e)}), 500

    return jsonify({"message": "Credentials saved successfully", "user": cred.to_dict()})
