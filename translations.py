# translations.py
from flask import current_app

LANGUAGE_COOKIE = "roatan-language"
SUPPORTED_LANGUAGES = ("es", "en")

TRANSLATIONS = {
    "es": {
        "nav": {
            "home": "Inicio",
            "services": "Tours",
            "gallery": "Galería",
            "contact": "Contacto",
            "experiences": "Experiencias",
        },
        "hero": {
            "title": "Descubre Roatán como jamás lo imaginaste",
            "subtitle": "Vive aventuras genuinas entre manglares, arrecifes y vida marina",
            "cta": "Explorar Experiencias",
            "description": (
                "Adéntrate en la esencia natural de Islas de la Bahía con excursiones "
                "diseñadas para mostrarte lo mejor de Roatán."
            ),
        },
        "services": {
            "title": "Tours y Servicios Destacados",
            "subtitle": (
                "Explora la riqueza natural de Roatán a través de experiencias "
                "auténticas y guiadas por expertos"
            ),
            "viewDetails": "Ver Detalles",
            "bookNow": "Reservar Ahora",
            "pricePerPerson": "Precio por Persona",
            "duration": "Duración",
            "included": "Incluye",
            "requirements": "Requisitos",
        },
        "experiences": {
            "title": "Experiencias Memorables",
            "subtitle": "Opiniones y vivencias de nuestros aventureros",
        },
        "gallery": {
            "title": "Galería de Aventuras",
            "subtitle": "Instantes inolvidables capturados en el paraíso",
            "viewAll": "Ver Todas",
        },
        "contact": {
            "title": "Ponte en Contacto",
            "subtitle": "Estamos listos para ayudarte a planear tu próxima aventura",
            "phone": "Teléfono",
            "email": "Correo Electrónico",
            "whatsapp": "WhatsApp",
            "social": "Síguenos",
            "name": "Nombre",
            "message": "Mensaje",
            "send": "Enviar",
            "sending": "Enviando...",
            "success": "Mensaje enviado con éxito",
            "error": "Ocurrió un error al enviar el mensaje",
        },
        "booking": {
            "title": "Reserva tu Aventura",
            "selectService": "Seleccionar Tour",
            "selectDate": "Seleccionar Fecha",
            "numberOfPeople": "Número de Personas",
            "customerInfo": "Datos del Cliente",
            "fullName": "Nombre Completo",
            "email": "Correo Electrónico",
            "phone": "Teléfono",
            "specialRequests": "Solicitudes Especiales",
            "paymentMethod": "Método de Pago",
            "paypal": "PayPal",
            "total": "Total",
            "book": "Confirmar Reserva",
            "cancel": "Cancelar",
        },
        "common": {
            "loading": "Cargando...",
            "error": "Error",
            "retry": "Reintentar",
            "back": "Atrás",
            "next": "Siguiente",
            "previous": "Anterior",
            "close": "Cerrar",
        },
    },
    "en": {
        "nav": {
            "home": "Home",
            "services": "Tours",
            "gallery": "Gallery",
            "contact": "Contact",
            "experiences": "Experiences",
        },
        "hero": {
            "title": "Experience Roatán Like Never Before",
            "subtitle": "Authentic adventures through mangroves, reefs, and marine life",
            "cta": "Explore Experiences",
            "description": (
                "Immerse yourself in the natural wonders of the Bay Islands with curated "
                "excursions that showcase the very best of Roatán."
            ),
        },
        "services": {
            "title": "Our Featured Tours & Services",
            "subtitle": (
                "Discover Roatán’s natural beauty through authentic experiences "
                "guided by local experts"
            ),
            "viewDetails": "View Details",
            "bookNow": "Book Now",
            "pricePerPerson": "Price per Person",
            "duration": "Duration",
            "included": "Included",
            "requirements": "Requirements",
        },
        "experiences": {
            "title": "Unforgettable Experiences",
            "subtitle": "What our adventurers are saying",
        },
        "gallery": {
            "title": "Adventure Gallery",
            "subtitle": "Unforgettable moments captured in paradise",
            "viewAll": "View All",
        },
        "contact": {
            "title": "Contact Us",
            "subtitle": "We’re here to help you plan your next adventure",
            "phone": "Phone",
            "email": "Email",
            "whatsapp": "WhatsApp",
            "social": "Follow Us",
            "name": "Name",
            "message": "Message",
            "send": "Send",
            "sending": "Sending...",
            "success": "Message sent successfully",
            "error": "Error sending message",
        },
        "booking": {
            "title": "Book Your Tour",
            "selectService": "Select Tour",
            "selectDate": "Select Date",
            "numberOfPeople": "Number of People",
            "customerInfo": "Customer Information",
            "fullName": "Full Name",
            "email": "Email",
            "phone": "Phone",
            "specialRequests": "Special Requests",
            "paymentMethod": "Payment Method",
            "paypal": "PayPal",
            "total": "Total",
            "book": "Confirm Booking",
            "cancel": "Cancel",
        },
        "common": {
            "loading": "Loading...",
            "error": "Error",
            "retry": "Retry",
            "back": "Back",
            "next": "Next",
            "previous": "Previous",
            "close": "Close",
        },
    },
}


def default_language():
    lang = current_app.config.get("DEFAULT_LANGUAGE", "en")
    return lang if lang in SUPPORTED_LANGUAGES else "en"


def resolve_language(request):
    """?lang= primero, luego la cookie, luego el idioma por defecto."""
    for candidate in (request.args.get("lang"), request.cookies.get(LANGUAGE_COOKIE)):
        if candidate in SUPPORTED_LANGUAGES:
            return candidate
    return default_language()


def get_translations(language):
    return TRANSLATIONS.get(language) or TRANSLATIONS[default_language()]
