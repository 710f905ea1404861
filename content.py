# content.py
"""Textos fijos del sitio: política de cancelación, confirmación y horarios."""

DEFAULT_CONTACT_EMAIL = "rteastendexp@gmail.com"
DEFAULT_PHONE = "+504 3226-7504"
CONTACT_WHATSAPP_MESSAGE = "Hello! I am interested in information about your tours"

BUSINESS_HOURS = [
    {"day": "Mon - Fri", "hours": "8:00 AM - 6:00 PM"},
    {"day": "Saturday", "hours": "8:00 AM - 5:00 PM"},
    {"day": "Sunday", "hours": "9:00 AM - 4:00 PM"},
]

REFUND_TABLE = [
    {"notice": "72 hours or more", "refund": "100% - 4% transaction fee"},
    {"notice": "48-72 hours", "refund": "50% - 4% transaction fee"},
    {"notice": "48 hours or less", "refund": "No refund"},
    {"notice": "No show", "refund": "No refund"},
]


def cancellation_policy(contact_email=None):
    email = contact_email or DEFAULT_CONTACT_EMAIL
    return {
        "title": "BOOKING POLICY & TERMS OF SERVICE",
        "sections": [
            {
                "title": "Booking and Payment",
                "items": [
                    "Full payment is required at the time of booking.",
                    "We accept credit cards, bank transfers, and payments via WhatsApp Business or direct link.",
                    "International payments must be made by credit card.",
                ],
            },
            {
                "title": "International Transactions",
                "text": (
                    "All prices and payments are in US dollars (USD). The client is responsible for any "
                    "exchange rates and international fees that may apply."
                ),
            },
            {
                "title": "Communications and Notifications",
                "text": (
                    "All booking confirmations, receipts, instructions, and communications will be sent to "
                    f"the email or phone number provided during booking. Add {email} to your safe contacts list."
                ),
            },
            {
                "title": "Arrival and Departure Requirements",
                "items": [
                    "All tours operate on local Honduran time (UTC/GMT-6).",
                    "Follow the provided meeting instructions and present your booking confirmation and valid ID.",
                    "Late arrivals will be marked as No Show with no refund unless a new time was confirmed.",
                    "All participants must return to the port at least one hour before ship departure.",
                ],
            },
            {
                "title": "Cancellations and Refunds",
                "text": (
                    f"All cancellation requests must be sent in writing to {email} with the subject "
                    "Cancellation or Refund plus the booking number."
                ),
                "table": REFUND_TABLE,
            },
            {
                "title": "Booking Transfers",
                "text": (
                    "With at least 48 hours' notice, you may transfer your credit to another person or service. "
                    "If the new service costs less, the difference will not be refunded."
                ),
            },
            {
                "title": "Weather Conditions",
                "text": (
                    "Light rain or normal tropical conditions are not grounds for cancellation. Only unsafe "
                    "weather cancels the excursion, with a full refund."
                ),
            },
        ],
    }


def booking_confirmation(email=None, tour_date=None, cruise_name=None):
    return {
        "title": "Booking Request Received!",
        "email": email,
        "tour_date": tour_date or "your selected date",
        "cruise_name": cruise_name,
        "next_steps": [
            "We will review your request and confirm availability.",
            f"A confirmation will be sent to {email or 'your email'}.",
            "Follow the meeting point instructions on the day of the tour.",
        ],
    }
