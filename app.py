# app.py
import os
from urllib.parse import quote

from flask import Flask, abort, jsonify, request, send_from_directory

from config import Config
from extensions import db, jwt, cors, bcrypt, revoked_tokens
from storage import GALLERY_BUCKET, PAQUETES_BUCKET, PRINCIPAL_BUCKET

# imports de rutas
import routes.auth_routes as auth_routes
import routes.site_routes as site_routes
import routes.booking_routes as booking_routes
import routes.admin_routes as admin_routes

LOGIN_PATH = "/admin-login"
PUBLIC_BUCKETS = {GALLERY_BUCKET, PAQUETES_BUCKET, PRINCIPAL_BUCKET}


def login_redirect():
    """/admin-login?redirect=<ruta pedida>"""
    return f"{LOGIN_PATH}?redirect={quote(request.path, safe='')}"


def _auth_error(message):
    return jsonify({"message": message, "redirect": login_redirect()}), 401


def register_jwt_handlers():
    @jwt.token_in_blocklist_loader
    def token_revoked(jwt_header, jwt_payload):
        return jwt_payload.get("jti") in revoked_tokens

    @jwt.unauthorized_loader
    def missing_token(reason):
        return _auth_error("Autenticación requerida")

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return _auth_error("Token inválido")

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return _auth_error("La sesión expiró")

    @jwt.revoked_token_loader
    def revoked_token(jwt_header, jwt_payload):
        return _auth_error("La sesión fue cerrada")


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Crear carpetas de los buckets si no existen
    for bucket in PUBLIC_BUCKETS:
        os.makedirs(os.path.join(app.config["UPLOAD_FOLDER"], bucket), exist_ok=True)

    # Inicializar extensiones
    db.init_app(app)
    jwt.init_app(app)
    bcrypt.init_app(app)

    cors_origins = app.config["CORS_ORIGINS"]
    if cors_origins == "*":
        origins_list = "*"
    else:
        origins_list = [o.strip() for o in cors_origins.split(",")]

    cors(app, resources={r"/*": {
        "origins": origins_list,
        "methods": ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        "allow_headers": ["Content-Type", "Authorization", "X-Requested-With"],
        "supports_credentials": origins_list != "*",
    }})

    register_jwt_handlers()

    # Registrar blueprints
    app.register_blueprint(auth_routes.auth_bp)
    app.register_blueprint(site_routes.site_bp)
    app.register_blueprint(booking_routes.booking_bp)
    app.register_blueprint(admin_routes.admin_bp)

    # Ruta de salud
    @app.get("/health")
    def health():
        return jsonify({"status": "ok"})

    # Servir archivos de los buckets
    @app.route("/uploads/<bucket>/<path:filename>")
    def uploaded_file(bucket, filename):
        if bucket not in PUBLIC_BUCKETS:
            abort(404)
        return send_from_directory(
            os.path.join(app.config["UPLOAD_FOLDER"], bucket), filename
        )

    @app.cli.command("init-db")
    def init_db():
        """Crea las tablas que falten."""
        db.create_all()
        app.logger.info("Tablas creadas")

    return app


app = create_app()

if __name__ == "__main__":
    app.run(debug=True, threaded=True, use_reloader=False)
