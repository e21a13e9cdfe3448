import random

from flask import Flask

from engine.utils import (
    DEFAULT_THEME,
    Surface,
    current_theme,
    debounce,
    fisher_yates,
    resize_surface,
    theme_colors,
)


def test_fisher_yates_is_an_in_place_permutation():
    items = list(range(20))
    out = fisher_yates(items, random.Random(7))
    assert out is items
    assert sorted(items) == list(range(20))


def test_fisher_yates_is_reproducible_with_a_seed():
    a = fisher_yates(list(range(10)), random.Random(3))
    b = fisher_yates(list(range(10)), random.Random(3))
    assert a == b


def test_fisher_yates_short_inputs():
    assert fisher_yates([]) == []
    assert fisher_yates([1]) == [1]


def test_resize_surface_scales_by_device_pixel_ratio():
    s = Surface(parent_width=800, device_pixel_ratio=2)
    w, h = resize_surface(s, 280, 0.5, 400)
    assert (w, h) == (800, 400)
    assert (s.width, s.height) == (1600, 800)
    assert (s.css_width, s.css_height) == (800, 400)


def test_resize_surface_honours_min_and_max_height():
    narrow = Surface(parent_width=300)
    assert resize_surface(narrow, 280, 0.5, 400) == (300, 280)
    wide = Surface(parent_width=2000)
    assert resize_surface(wide, 280, 0.5, 400) == (2000, 400)
    # no max: height follows the ratio
    assert resize_surface(Surface(parent_width=2000), 300, 0.45) == (2000, 900)


def test_theme_colors_defaults_to_dark_outside_a_request():
    assert current_theme() == DEFAULT_THEME
    assert theme_colors().bg == theme_colors("dark").bg


def test_theme_colors_light_and_unknown():
    assert theme_colors("light").bg == "#f8fafc"
    assert theme_colors("neon") == theme_colors("dark")


def test_current_theme_reads_the_cookie():
    app = Flask(__name__)
    app.config["VIS_THEME_COOKIE"] = "theme"
    with app.test_request_context("/", headers={"Cookie": "theme=light"}):
        assert current_theme() == "light"
        assert theme_colors().bg == "#f8fafc"
    with app.test_request_context("/"):
        assert current_theme() == DEFAULT_THEME


def test_debounce_runs_once_after_the_burst(clock, scheduler):
    calls = []
    handler = debounce(lambda: calls.append(clock.t), scheduler, wait=0.1)
    handler()
    clock.t = 0.05
    handler()
    clock.t = 0.09
    handler()

    clock.t = 0.15
    scheduler.run_pending()
    assert calls == []
    clock.t = 0.2
    scheduler.run_pending()
    assert calls == [0.2]
    assert scheduler.pending() == 0
