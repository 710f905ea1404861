import threading

from widgets import Carousel, Lightbox, Marquee, Ticker


def test_carousel_wraps_both_ways():
    c = Carousel(4)
    c.index = 3
    assert c.next() == 0
    assert c.previous() == 3
    c.index = 0
    assert c.previous() == 3


def test_carousel_tick_respects_pause_and_direction():
    c = Carousel(3)
    assert c.tick() == 1
    c.pause()
    assert c.tick() == 1
    c.resume()
    c.previous()
    assert c.index == 0
    assert c.tick() == 2


def test_carousel_single_item_never_moves():
    c = Carousel(1)
    assert c.tick() == 0
    c.start()
    assert c._ticker is None


def test_empty_carousel():
    c = Carousel(0)
    assert c.next() == 0
    assert c.previous() == 0


def test_lightbox_scroll_lock_and_keys():
    box = Lightbox(["a.jpg", "", "b.jpg", "c.jpg"])
    assert not box.scroll_locked
    assert box.open(2) == "c.jpg"
    assert box.scroll_locked
    assert box.handle_key("ArrowRight")
    assert box.current == "a.jpg"
    assert box.handle_key("ArrowLeft")
    assert box.current == "c.jpg"
    assert not box.handle_key("Enter")
    assert box.handle_key("Escape")
    assert not box.is_open
    assert not box.scroll_locked


def test_lightbox_without_images_does_not_open():
    box = Lightbox([])
    assert box.open(0) is None
    assert not box.scroll_locked


def test_marquee_duplicates_and_wraps():
    m = Marquee(["a", "b"], speed=10)
    assert m.track == ["a", "b", "a", "b"]
    assert m.step(40) == 10
    assert m.step(40) == 0


def test_marquee_manual_scroll_on_narrow_viewports():
    assert Marquee.uses_manual_scroll(375)
    assert not Marquee.uses_manual_scroll(1024)


def test_ticker_runs_until_cancelled():
    hits = threading.Event()
    with Ticker(0.01, hits.set) as ticker:
        assert hits.wait(2)
        assert ticker.running
    assert not ticker.running


def test_carousel_stop_cancels_ticker():
    c = Carousel(3, interval=0.01)
    with c:
        assert c._ticker.running
    assert c._ticker is None
