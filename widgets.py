# widgets.py
"""
Estado de los componentes interactivos del sitio: carruseles, lightbox
de la galería y el marquee de paquetes.

El avance automático usa un Ticker (threading.Timer que se re-arma).
Siempre cancelar al terminar; como context manager se cancela solo.
"""
import logging
import threading

logger = logging.getLogger(__name__)

CAROUSEL_INTERVAL = 5.0  # segundos
MOBILE_BREAKPOINT = 768  # px


class Ticker:
    """Llama a callback cada `interval` segundos hasta cancel()."""

    def __init__(self, interval, callback):
        self.interval = interval
        self.callback = callback
        self._timer = None
        self._lock = threading.Lock()
        self._running = False

    @property
    def running(self):
        return self._running

    def _arm(self):
        self._timer = threading.Timer(self.interval, self._run)
        self._timer.daemon = True
        self._timer.start()

    def _run(self):
        with self._lock:
            if not self._running:
                return
        try:
            self.callback()
        except Exception as e:
            logger.error("Error en el ticker: %s", e)
        with self._lock:
            if self._running:
                self._arm()

    def start(self):
        with self._lock:
            if self._running:
                return self
            self._running = True
            self._arm()
        return self

    def cancel(self):
        with self._lock:
            self._running = False
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.cancel()
        return False


class Carousel:
    def __init__(self, size, interval=None):
        self.size = max(int(size), 0)
        self.interval = interval or CAROUSEL_INTERVAL
        self.index = 0
        self.direction = 1
        self.paused = False
        self._ticker = None

    def next(self):
        if self.size:
            self.direction = 1
            self.index = (self.index + 1) % self.size
        return self.index

    def previous(self):
        if self.size:
            self.direction = -1
            self.index = (self.index - 1) % self.size
        return self.index

    def go_to(self, index):
        if self.size:
            self.direction = 1 if index >= self.index else -1
            self.index = int(index) % self.size
        return self.index

    def tick(self):
        """Avance automático; no hace nada en pausa o con un solo item."""
        if self.paused or self.size <= 1:
            return self.index
        self.index = (self.index + self.direction) % self.size
        return self.index

    # hover / touch
    def pause(self):
        self.paused = True

    def resume(self):
        self.paused = False

    def start(self):
        if self._ticker is None and self.size > 1:
            self._ticker = Ticker(self.interval, self.tick).start()
        return self

    def stop(self):
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.stop()
        return False


class Lightbox:
    def __init__(self, images):
        self.images = [img for img in (images or []) if img]
        self.index = None
        self.scroll_locked = False

    @property
    def is_open(self):
        return self.index is not None

    @property
    def current(self):
        return self.images[self.index] if self.is_open else None

    def open(self, index=0):
        if not self.images:
            return None
        self.index = int(index) % len(self.images)
        self.scroll_locked = True
        return self.current

    def close(self):
        self.index = None
        self.scroll_locked = False

    def next(self):
        if self.is_open:
            self.index = (self.index + 1) % len(self.images)
        return self.current

    def previous(self):
        if self.is_open:
            self.index = (self.index - 1) % len(self.images)
        return self.current

    def handle_key(self, key):
        if not self.is_open:
            return False
        if key == "ArrowRight":
            self.next()
        elif key == "ArrowLeft":
            self.previous()
        elif key == "Escape":
            self.close()
        else:
            return False
        return True


class Marquee:
    """Items duplicados para un scroll infinito sin saltos."""

    def __init__(self, items, speed=1):
        self.items = list(items or [])
        self.speed = speed
        self.position = 0

    @property
    def track(self):
        return self.items + self.items

    @staticmethod
    def uses_manual_scroll(viewport_width):
        # en pantallas chicas la animación CSS se reemplaza por scroll manual
        return viewport_width < MOBILE_BREAKPOINT

    def step(self, scroll_width):
        """Avanza la posición y vuelve a 0 al llegar a la mitad del track."""
        half = scroll_width / 2
        self.position += self.speed
        if half <= 0 or self.position >= half:
            self.position = 0
        return self.position
