# mappers.py
"""
Conversión de filas crudas de la base de datos a los modelos de vista
que consume el front. Aquí se normaliza todo: imágenes vacías, precios
ausentes, JSON mal formado y categorías desconocidas.
"""
import json
import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from models import (
    PAQUETE_IMAGE_COLUMNS,
    GALLERY_IMAGE_COLUMNS,
    PRIVATE_TOUR_IMAGE_COLUMNS,
    VIDEO_COLUMNS,
)
from text_format import format_text_to_html

DEFAULT_TOUR_CATEGORY = "adventure"
DEFAULT_GALLERY_CATEGORY = "general"

TOUR_CATEGORIES = {
    "water-adventure": {"label": "Agua", "color": "from-blue-500 to-cyan-500", "icon": "🏊‍♂️"},
    "nature": {"label": "Naturaleza", "color": "from-green-500 to-emerald-500", "icon": "🌿"},
    "romantic": {"label": "Romántico", "color": "from-pink-500 to-rose-500", "icon": "💕"},
}
DEFAULT_TOUR_BADGE = {"label": "Aventura", "color": "from-teal-500 to-blue-500", "icon": "🏝️"}

GALLERY_CATEGORIES = {
    "mangroves": {"label": "Manglares", "color": "bg-green-500"},
    "underwater": {"label": "Submarinas", "color": "bg-blue-500"},
    "nature": {"label": "Naturaleza", "color": "bg-emerald-500"},
    "sunset": {"label": "Atardeceres", "color": "bg-orange-500"},
    "wildlife": {"label": "Fauna", "color": "bg-yellow-500"},
    "aerial": {"label": "Aéreas", "color": "bg-purple-500"},
}
DEFAULT_GALLERY_BADGE = {"label": "General", "color": "bg-teal-500"}

PRIVATE_TOUR_ACTIVITY_COLUMNS = ["activity_1", "activity_2", "activity_3", "activity_4"]


# -----------------------
# MODELOS DE VISTA
# -----------------------

class TourView(BaseModel):
    id: str
    name: str = ""
    description: str = ""
    description_html: str = ""
    person_price: float = 0
    price: float = 0
    image: str = ""
    images: List[str] = Field(default_factory=list)
    duration: str = ""
    included: Optional[List[str]] = None
    category: str = DEFAULT_TOUR_CATEGORY
    badge: Dict[str, str] = Field(default_factory=dict)
    max_personas: Optional[int] = None


class GalleryItemView(BaseModel):
    id: str
    image: str = ""
    images: List[str] = Field(default_factory=list)
    title: str = ""
    description: str = ""
    category: str = DEFAULT_GALLERY_CATEGORY
    badge: Dict[str, str] = Field(default_factory=dict)


class ExperienceView(BaseModel):
    id: str
    title: str = ""
    description: str = ""
    image: str = ""
    rating: float = 5
    testimonial: str = ""
    author: str = ""


class PrivateTourView(BaseModel):
    id: int
    title: str = ""
    summary: str = ""
    description: str = ""
    description_html: str = ""
    image: str = ""
    images: List[str] = Field(default_factory=list)
    price_1_person: Optional[float] = None
    price_2_persons: Optional[float] = None
    price_3_persons: Optional[float] = None
    price_4_persons: Optional[float] = None
    price_children_under_5: Optional[float] = None
    whats_included: str = ""
    duration: str = ""
    tour_notes: str = ""
    tour_notes_html: str = ""
    show_additional_options: bool = False
    available_days: List[str] = Field(default_factory=list)
    activities: List[str] = Field(default_factory=list)


class SiteView(BaseModel):
    name: str = ""
    logo: Optional[str] = None
    hero_image: Optional[str] = None
    gallery_cover: Optional[str] = None
    hero_video: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    social: Dict[str, str] = Field(default_factory=dict)
    whatsapp_url: str = ""


# -----------------------
# HELPERS
# -----------------------

def image_list(row: Dict[str, Any], columns) -> List[str]:
    return [row.get(col) for col in columns if row.get(col)]


def first_image(row: Dict[str, Any], columns) -> str:
    images = image_list(row, columns)
    return images[0] if images else ""


def parse_included(raw) -> Optional[List[str]]:
    """Lista JSON en texto -> lista de strings. Cualquier otra cosa -> None."""
    if not raw:
        return None
    if isinstance(raw, list):
        return [str(item) for item in raw]
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return None
    if not isinstance(parsed, list):
        return None
    return [str(item) for item in parsed]


def _to_float(value) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def resolve_price(row: Dict[str, Any]) -> float:
    """precio_por_persona, luego price, luego 0."""
    for col in ("precio_por_persona", "price"):
        value = _to_float(row.get(col))
        if value is not None:
            return value
    return 0.0


def tour_category_badge(category: Optional[str]) -> Dict[str, str]:
    return dict(TOUR_CATEGORIES.get(category or "", DEFAULT_TOUR_BADGE))


def gallery_category_badge(category: Optional[str]) -> Dict[str, str]:
    return dict(GALLERY_CATEGORIES.get(category or "", DEFAULT_GALLERY_BADGE))


def whatsapp_number(phone: Optional[str], fallback: str) -> str:
    if phone:
        cleaned = re.sub(r"[^0-9+]", "", phone)
        if cleaned:
            return cleaned
    return fallback


# -----------------------
# MAPPERS
# -----------------------

def map_tour(row: Dict[str, Any]) -> TourView:
    images = image_list(row, PAQUETE_IMAGE_COLUMNS)
    price = resolve_price(row)
    category = row.get("categoria") or DEFAULT_TOUR_CATEGORY
    description = row.get("descripcion") or ""
    max_personas = row.get("max_personas")
    return TourView(
        id=str(row.get("id")),
        name=row.get("titulo") or "",
        description=description,
        description_html=format_text_to_html(description),
        person_price=price,
        price=price,
        image=images[0] if images else "",
        images=images,
        duration=row.get("duracion") or "",
        included=parse_included(row.get("incluye")),
        category=category,
        badge=tour_category_badge(category),
        max_personas=int(max_personas) if max_personas is not None else None,
    )


def map_gallery_item(row: Dict[str, Any]) -> GalleryItemView:
    images = image_list(row, GALLERY_IMAGE_COLUMNS)
    category = row.get("category") or DEFAULT_GALLERY_CATEGORY
    return GalleryItemView(
        id=str(row.get("id")),
        image=images[0] if images else "",
        images=images,
        title=row.get("title") or row.get("titulo") or "",
        description=row.get("description") or row.get("descripcion") or "",
        category=category,
        badge=gallery_category_badge(category),
    )


def map_experience(row: Dict[str, Any]) -> ExperienceView:
    rating = _to_float(row.get("rating"))
    return ExperienceView(
        id=str(row.get("id")),
        title=row.get("title") or "",
        description=row.get("description") or "",
        image=row.get("image") or "",
        rating=rating if rating is not None else 5,
        testimonial=row.get("testimonial") or "",
        author=row.get("author") or "",
    )


def map_private_tour(row: Dict[str, Any]) -> PrivateTourView:
    images = image_list(row, PRIVATE_TOUR_IMAGE_COLUMNS)
    days = row.get("available_days") or []
    if isinstance(days, str):
        days = parse_included(days) or []
    description = row.get("description") or ""
    notes = row.get("tour_notes") or ""
    return PrivateTourView(
        id=int(row["id"]),
        title=row.get("title") or "",
        summary=row.get("summary") or "",
        description=description,
        description_html=format_text_to_html(description),
        image=images[0] if images else "",
        images=images,
        price_1_person=_to_float(row.get("price_1_person")),
        price_2_persons=_to_float(row.get("price_2_persons")),
        price_3_persons=_to_float(row.get("price_3_persons")),
        price_4_persons=_to_float(row.get("price_4_persons")),
        price_children_under_5=_to_float(row.get("price_children_under_5")),
        whats_included=row.get("whats_included") or "",
        duration=row.get("duration") or "",
        tour_notes=notes,
        tour_notes_html=format_text_to_html(notes),
        show_additional_options=bool(row.get("show_additional_options")),
        available_days=[str(d) for d in days],
        activities=image_list(row, PRIVATE_TOUR_ACTIVITY_COLUMNS),
    )


def map_site_settings(row: Optional[Dict[str, Any]], fallback_number: str) -> SiteView:
    row = row or {}
    social = {
        key: row[key]
        for key in ("facebook", "instagram", "tiktok")
        if row.get(key)
    }
    number = whatsapp_number(row.get("celular"), fallback_number)
    return SiteView(
        name=row.get("nombre_web") or "",
        logo=row.get("logo"),
        hero_image=row.get("portada"),
        gallery_cover=row.get("portada_galeria"),
        hero_video=row.get("video_fondo"),
        phone=row.get("celular"),
        email=row.get("correo"),
        address=row.get("direccion"),
        social=social,
        whatsapp_url=f"https://wa.me/{number}",
    )


def map_videos(row: Optional[Dict[str, Any]]) -> List[str]:
    return image_list(row or {}, VIDEO_COLUMNS)
