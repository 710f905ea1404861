# config.py
import os
import tempfile
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()  # carga .env si existe

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


class Config:
    # Base de datos (Postgres en producción, SQLite local por defecto)
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "roatan.db"),
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": 300,
    }

    # JWT
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "super-secret-key")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=24)

    # CORS
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    # Buckets de archivos (imágenes y videos en el mismo servidor)
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", os.path.join(BASE_DIR, "uploads"))
    PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "")
    MAX_CONTENT_LENGTH = 100 * 1024 * 1024  # 100 MB, videos incluidos

    # Reservas
    WHATSAPP_NUMBER = os.getenv("WHATSAPP_NUMBER", "50432267504")
    BOOKING_WEBHOOK_URL = os.getenv("BOOKING_WEBHOOK_URL", "")
    BOOKING_WEBHOOK_TIMEOUT = float(os.getenv("BOOKING_WEBHOOK_TIMEOUT", "10"))

    # Correo (Resend)
    RESEND_API_KEY = os.getenv("RESEND_API_KEY", "")
    RESEND_FROM_EMAIL = os.getenv("RESEND_FROM_EMAIL", "onboarding@resend.dev")
    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "rteastendexp@gmail.com")

    # Experiencias (Google Sheets)
    SHEETS_API_KEY = os.getenv("SHEETS_API_KEY", "")
    SHEETS_SPREADSHEET_ID = os.getenv("SHEETS_SPREADSHEET_ID", "")

    # Idioma
    DEFAULT_LANGUAGE = os.getenv("DEFAULT_LANGUAGE", "en")


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    JWT_SECRET_KEY = "test-secret-key-with-enough-length-for-hs256"
    BCRYPT_LOG_ROUNDS = 4
    UPLOAD_FOLDER = os.path.join(tempfile.gettempdir(), "roatan-test-uploads")
    PUBLIC_BASE_URL = "http://testserver"
    BOOKING_WEBHOOK_URL = "https://script.example.com/exec"
    BOOKING_WEBHOOK_TIMEOUT = 2
    RESEND_API_KEY = ""
    SHEETS_API_KEY = ""
