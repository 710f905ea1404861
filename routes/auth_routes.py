# routes/auth_routes.py
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import create_access_token, jwt_required, get_jwt, get_jwt_identity

from extensions import db, bcrypt, revoke_token
from models import AdminCredential

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")
INVALID_CREDENTIALS = "Invalid credentials"


def check_admin_password(admin, password) -> bool:
    """Solo se aceptan hashes bcrypt. Cualquier otro valor guardado falla."""
    stored = (admin.password_hash or "") if admin else ""
    if not stored.startswith(BCRYPT_PREFIXES):
        return False
    try:
        return bcrypt.check_password_hash(stored, password)
    except ValueError:
        return False


def current_admin():
    admin_id = get_jwt_identity()
    try:
        return db.session.get(AdminCredential, int(admin_id))
    except (TypeError, ValueError):
        return None


@auth_bp.post("/login")
def login():
    data = request.get_json(silent=True) or {}
    username = (data.get("username") or "").strip()
    password = data.get("password") or ""

    if not username or not password:
        return jsonify({"message": INVALID_CREDENTIALS}), 401

    admin = AdminCredential.query.filter_by(username=username).first()
    if not admin or not check_admin_password(admin, password):
        current_app.logger.warning("Intento de login fallido para '%s'", username)
        return jsonify({"message": INVALID_CREDENTIALS}), 401

    access_token = create_access_token(identity=str(admin.id))
    return jsonify({
        "user": admin.to_dict(),
        "access_token": access_token
    })


@auth_bp.post("/logout")
@jwt_required()
def logout():
    claims = get_jwt()
    revoke_token(claims["jti"], claims["exp"])
    return jsonify({"message": "Sesión cerrada"})


@auth_bp.get("/me")
@jwt_required()
def me():
    admin = current_admin()
    if not admin:
        return jsonify({"message": "Usuario no encontrado"}), 404
    return jsonify({"user": admin.to_dict()})


@auth_bp.get("/verify")
@jwt_required()
def verify_token():
    """Verifica si el token JWT es válido"""
    admin = current_admin()
    if not admin:
        return jsonify({"valid": False, "message": "Usuario no encontrado"}), 401
    return jsonify({"valid": True, "user": admin.to_dict()}), 200
