# extensions.py
import time

from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from flask_cors import CORS
from flask_bcrypt import Bcrypt

db = SQLAlchemy()
jwt = JWTManager()
bcrypt = Bcrypt()
cors = CORS

# jti -> exp de tokens cerrados con /auth/logout (en memoria, por proceso)
revoked_tokens = {}


def revoke_token(jti, exp, now=None):
    """Marca el jti como revocado y descarta los que ya expiraron."""
    now = time.time() if now is None else now
    for old_jti, old_exp in list(revoked_tokens.items()):
        if old_exp <= now:
            del revoked_tokens[old_jti]
    revoked_tokens[jti] = exp
