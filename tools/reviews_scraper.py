# tools/reviews_scraper.py
"""
Servicio aparte que lee reseñas de TripAdvisor con Chrome headless.

    python tools/reviews_scraper.py
    GET /reviews?url=<página>&max=10
"""
import logging
import os
import re
import time

from bs4 import BeautifulSoup
from flask import Flask, jsonify, request
from flask_cors import CORS
from selenium import webdriver
from selenium.webdriver.chrome.options import Options

logger = logging.getLogger(__name__)

CACHE_TTL = 5 * 60  # segundos
DEFAULT_MAX = 10
MAX_REVIEWS = 50
PAGE_WAIT = 1.5
USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/115 Safari/537.36"
)

REVIEW_SELECTORS = [
    '[data-test-target="reviews-tab"] .review-container',
    ".reviewSelector",
    ".Yibkl",
    "[data-reviewid]",
]
TITLE_SELECTORS = [".quote, .title, .reviewTitle", "h3, h2"]
TEXT_SELECTORS = [".partial_entry, .entry, .reviewText", "p"]
RATING_SELECTOR = '[class*="ui_bubble_rating"], [aria-label*="bubble"]'
AUTHOR_SELECTORS = [".info_text, .username, .member_info", 'a[href*="/Profile/"]']
DATE_SELECTOR = '.ratingDate, .date, [class*="EventDate__event_date"]'

_BUBBLE = re.compile(r"bubble_(\d+)")
_NUMBER = re.compile(r"(\d+(?:\.\d+)?)")
_REVIEW_WORD = re.compile(r"Reviewed|Review")

# url::max -> (timestamp, reseñas)
_cache = {}


def _first(node, selectors):
    for selector in selectors:
        found = node.select_one(selector)
        if found:
            return found
    return None


def _text(el):
    return el.get_text(" ", strip=True) if el else None


def parse_rating(el):
    """bubble_45 -> 4.5; si no, el primer número del aria-label."""
    if el is None:
        return None
    classes = el.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    m = _BUBBLE.search(" ".join(classes) or el.get("aria-label") or "")
    if m:
        return int(m.group(1)) / 10
    label = el.get("aria-label")
    if label:
        mm = _NUMBER.search(label)
        if mm:
            return float(mm.group(1))
    return None


def _find_review_nodes(soup, max_reviews):
    for selector in REVIEW_SELECTORS:
        nodes = soup.select(selector)
        if nodes:
            return nodes

    # heurística: divs que mencionan "Review" o tienen burbujas de rating
    nodes = [
        div for div in soup.find_all("div")
        if _REVIEW_WORD.search(div.get_text(" ", strip=True) or "")
        or div.select_one('[aria-label*="bubble"]')
    ]
    return nodes[: max_reviews * 3]


def parse_reviews(html, max_reviews=DEFAULT_MAX):
    soup = BeautifulSoup(html or "", "html.parser")
    reviews = []
    for node in _find_review_nodes(soup, max_reviews)[:max_reviews]:
        reviews.append({
            "title": _text(_first(node, TITLE_SELECTORS)),
            "text": _text(_first(node, TEXT_SELECTORS)),
            "rating": parse_rating(node.select_one(RATING_SELECTOR)),
            "author": _text(_first(node, AUTHOR_SELECTORS)),
            "date": _text(node.select_one(DATE_SELECTOR)),
        })
    return reviews


def fetch_html(url, wait_time=PAGE_WAIT):
    chrome_options = Options()
    chrome_options.add_argument("--headless")
    chrome_options.add_argument("--no-sandbox")
    chrome_options.add_argument("--disable-setuid-sandbox")
    chrome_options.add_argument("--disable-dev-shm-usage")
    chrome_options.add_argument(f"--user-agent={USER_AGENT}")

    driver = webdriver.Chrome(options=chrome_options)
    try:
        driver.set_page_load_timeout(30)
        driver.get(url)
        time.sleep(wait_time)
        return driver.page_source
    finally:
        driver.quit()


def scrape_reviews(url, max_reviews=DEFAULT_MAX, now=None):
    key = f"{url}::{max_reviews}"
    now = time.time() if now is None else now
    cached = _cache.get(key)
    if cached and now - cached[0] < CACHE_TTL:
        return cached[1]

    reviews = parse_reviews(fetch_html(url), max_reviews)
    _cache[key] = (now, reviews)
    return reviews


def create_app():
    app = Flask(__name__)
    CORS(app)

    @app.get("/reviews")
    def reviews():
        url = request.args.get("url")
        if not url:
            return jsonify({"ok": False, "error": "Missing url query parameter"}), 400

        max_reviews = request.args.get("max", default=DEFAULT_MAX, type=int) or DEFAULT_MAX
        max_reviews = min(MAX_REVIEWS, max_reviews)
        try:
            items = scrape_reviews(url, max_reviews)
        except Exception as e:
            app.logger.error("Error leyendo reseñas de %s: %s", url, e)
            return jsonify({"ok": False, "error": str(e)}), 500

        return jsonify({"ok": True, "source": url, "count": len(items), "reviews": items})

    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_app().run(port=int(os.getenv("PORT", "3000")))
