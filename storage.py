# storage.py
"""
Buckets de archivos guardados en el mismo servidor.

Cada bucket es una carpeta dentro de UPLOAD_FOLDER y se sirve en
/uploads/<bucket>/<path>. La URL pública es lo que se guarda en las filas.
"""
import logging
import os
import time
from urllib.parse import urlparse

from flask import current_app
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)

GALLERY_BUCKET = "galery"
PAQUETES_BUCKET = "paquetes"
PRINCIPAL_BUCKET = "principal"

IMAGE_EXTENSIONS = {"png", "jpg", "jpeg", "webp", "gif"}
VIDEO_EXTENSIONS = {"mp4", "webm", "mov"}


class StorageError(Exception):
    pass


def allowed_file(filename: str, extensions=IMAGE_EXTENSIONS) -> bool:
    return "." in filename and filename.rsplit(".", 1)[1].lower() in extensions


def timestamped_path(folder: str, slot: str, filename: str) -> str:
    """<folder>/<epoch_ms>_<slot>_<nombre seguro>"""
    safe_name = secure_filename(filename) or "file"
    stamp = int(time.time() * 1000)
    name = f"{stamp}_{slot}_{safe_name}"
    return f"{folder}/{name}" if folder else name


class Bucket:
    def __init__(self, name, root=None, base_url=None):
        self.name = name
        self._root = root
        self._base_url = base_url

    @property
    def root(self):
        root = self._root or current_app.config["UPLOAD_FOLDER"]
        return os.path.join(root, self.name)

    @property
    def base_url(self):
        if self._base_url is not None:
            return self._base_url
        return current_app.config.get("PUBLIC_BASE_URL", "")

    def _full_path(self, path):
        full = os.path.normpath(os.path.join(self.root, path))
        if not full.startswith(os.path.normpath(self.root) + os.sep):
            raise StorageError(f"Ruta inválida: {path}")
        return full

    def upload(self, path, file):
        """Guarda un FileStorage (o cualquier objeto con .save) en el bucket."""
        full = self._full_path(path)
        try:
            os.makedirs(os.path.dirname(full), exist_ok=True)
            file.save(full)
        except OSError as e:
            raise StorageError(f"Error subiendo {path}: {e}") from e
        return path

    def remove(self, paths):
        """Elimina los blobs indicados. Los que no existen se ignoran."""
        removed = []
        for path in paths:
            full = self._full_path(path)
            if not os.path.exists(full):
                continue
            try:
                os.remove(full)
            except OSError as e:
                raise StorageError(f"Error eliminando {path}: {e}") from e
            removed.append(path)
        return removed

    def get_public_url(self, path):
        return f"{self.base_url}/uploads/{self.name}/{path}"

    def path_from_public_url(self, url):
        """Devuelve el path dentro del bucket, o None si la URL no es nuestra."""
        if not url:
            return None
        parts = urlparse(url).path.split("/")
        if self.name not in parts:
            return None
        idx = parts.index(self.name)
        path = "/".join(parts[idx + 1:])
        return path or None


def get_bucket(name) -> Bucket:
    return Bucket(name)


def remove_url(bucket, url) -> bool:
    """Borra el blob detrás de una URL pública. Los errores solo se registran."""
    path = bucket.path_from_public_url(url)
    if not path:
        return False
    try:
        bucket.remove([path])
        return True
    except StorageError as e:
        logger.warning("No se pudo eliminar %s de %s: %s", path, bucket.name, e)
        return False


def store_blob(bucket, folder, slot, file):
    """Sube un archivo para un slot y devuelve su URL pública."""
    path = timestamped_path(folder, slot, file.filename)
    bucket.upload(path, file)
    return bucket.get_public_url(path)


class PendingBlobs:
    """
    Subidas de una misma operación del admin.

    Los blobs anteriores solo se borran en finalize(), cuando la fila ya se
    guardó. Si la fila falla, discard() borra lo que se subió.
    """

    def __init__(self, bucket):
        self.bucket = bucket
        self.uploaded = []
        self.replaced = []

    def put(self, folder, slot, file, previous_url=None):
        url = store_blob(self.bucket, folder, slot, file)
        self.uploaded.append(url)
        if previous_url:
            self.replaced.append(previous_url)
        return url

    def drop(self, previous_url):
        """Slot vaciado sin archivo nuevo: el blob anterior se borra en finalize()."""
        self.replaced.append(previous_url)

    def finalize(self):
        for url in self.replaced:
            remove_url(self.bucket, url)
        self.replaced = []

    def discard(self):
        for url in self.uploaded:
            remove_url(self.bucket, url)
        self.uploaded = []
