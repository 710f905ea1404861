# sheets.py
"""Experiencias (testimonios) leídas de una hoja de Google Sheets."""
import requests
from flask import current_app

from mappers import map_experience

SHEETS_BASE_URL = "https://sheets.googleapis.com/v4/spreadsheets"
EXPERIENCES_SHEET = "Experience"
SHEETS_TIMEOUT = 10

# columna -> alias en español
_COLUMN_ALIASES = {
    "id": (),
    "title": ("titulo",),
    "description": ("descripcion",),
    "image": ("imagen",),
    "rating": ("calificacion",),
    "testimonial": ("testimonio",),
    "author": ("autor",),
}

SAMPLE_EXPERIENCES = [
    {
        "id": "exp1",
        "title": "Una experiencia increíble",
        "description": (
            "El tour de manglares fue absolutamente mágico. Nuestro guía fue muy conocedor "
            "y nos mostró lugares que nunca hubiéramos encontrado solos."
        ),
        "image": "/images/tropical-wildlife.jpg",
        "rating": 5,
        "testimonial": (
            "Una aventura que recordaré para siempre. El equipo fue profesional "
            "y la naturaleza, simplemente espectacular."
        ),
        "author": "María González - España",
    },
    {
        "id": "exp2",
        "title": "Perfecto para familias",
        "description": (
            "Llevé a mis hijos y todos disfrutamos muchísimo. Las actividades están "
            "perfectamente organizadas para todas las edades."
        ),
        "image": "/images/roatan-paradise.jpg",
        "rating": 5,
        "testimonial": "Mis hijos no paran de hablar de los peces tropicales que vieron. ¡Definitivamente volveremos!",
        "author": "John Smith - Estados Unidos",
    },
    {
        "id": "exp3",
        "title": "Naturaleza pura",
        "description": (
            "Como biólogo marino, quedé impresionado con la biodiversidad "
            "y el compromiso con la conservación."
        ),
        "image": "/images/aerial-beach-view.jpeg",
        "rating": 5,
        "testimonial": "Roatan East Hidden Gem realmente cuida y respeta el ecosistema. Una empresa responsable.",
        "author": "Dr. Ana Rodríguez - México",
    },
]


def sample_experiences():
    return [map_experience(row) for row in SAMPLE_EXPERIENCES]


def rows_to_experiences(values):
    """
    values: lista de filas de la API (la primera son los encabezados).
    Las filas sin título se descartan.
    """
    if not values or len(values) < 2:
        return []

    headers = [str(h).strip().lower() for h in values[0]]

    def cell(row, column):
        for name in (column, *_COLUMN_ALIASES[column]):
            if name in headers:
                idx = headers.index(name)
                if idx < len(row) and row[idx] not in (None, ""):
                    return row[idx]
        return None

    experiences = []
    for i, row in enumerate(values[1:], start=1):
        record = {col: cell(row, col) for col in _COLUMN_ALIASES}
        if not record["title"]:
            continue
        record["id"] = record["id"] or f"exp-{i}"
        experiences.append(map_experience(record))
    return experiences


def sheet_url(sheet_name):
    spreadsheet_id = current_app.config.get("SHEETS_SPREADSHEET_ID")
    return f"{SHEETS_BASE_URL}/{spreadsheet_id}/values/{sheet_name}"


def get_experiences():
    """Experiencias de la hoja; si falla cualquier cosa, las de ejemplo."""
    api_key = current_app.config.get("SHEETS_API_KEY")
    if not api_key or not current_app.config.get("SHEETS_SPREADSHEET_ID"):
        return sample_experiences()

    try:
        resp = requests.get(
            sheet_url(EXPERIENCES_SHEET),
            params={"key": api_key},
            timeout=SHEETS_TIMEOUT,
        )
        resp.raise_for_status()
        return rows_to_experiences(resp.json().get("values"))
    except Exception as e:
        current_app.logger.error("Error leyendo experiencias de Google Sheets: %s", e)
        return sample_experiences()
