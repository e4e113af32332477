from __future__ import annotations

from maestro.compiler.features import (
    detect_keywords,
    extract_color,
    extract_count,
    extract_duration,
    extract_features,
    extract_opacity,
    extract_playback_speed,
    extract_stroke_width,
    extract_text_content,
    resolve_position,
)
from maestro.protocol.models import Artboard


def test_keywords_match_whole_words_case_insensitively() -> None:
    flags = detect_keywords("A ROBOT waves in a Neon room")
    assert flags["robot"] is True
    assert flags["neon"] is True
    assert flags["studio"] is True
    assert detect_keywords("an obscene thing")["scene"] is False
    assert detect_keywords("redraw it")["draw"] is False


def test_color_prefers_hex_then_named_colors() -> None:
    assert extract_color("draw a blue circle") == "#3b82f6"
    assert extract_color("make it #ff00aa and red") == "#ff00aa"
    assert extract_color("no colors here") is None


def test_opacity_forms() -> None:
    assert extract_opacity("make it transparent") == 0.2
    assert extract_opacity("set it to 50%") == 0.5
    assert extract_opacity("opacity 0.3") == 0.3
    assert extract_opacity("opacity 80") == 0.8
    assert extract_opacity("plain request") is None


def test_count_from_digits_words_and_cap() -> None:
    assert extract_count("add 3 circles") == 3
    assert extract_count("add three squares") == 3
    assert extract_count("add 50 circles") == 12
    assert extract_count("add a circle") == 1


def test_numbers_for_stroke_duration_and_speed() -> None:
    assert extract_stroke_width("outline 4 please") == 4.0
    assert extract_duration("duration 6") == 6.0
    assert extract_duration("spin for 3 seconds") == 3.0
    assert extract_playback_speed("speed 2") == 2.0
    assert extract_playback_speed("play at 1.5x") == 1.5


def test_text_content_quoted_or_trailing_token() -> None:
    assert extract_text_content('add text "Hello World"') == "Hello World"
    assert extract_text_content("add title welcome home in the center") == "welcome home"
    assert extract_text_content("add a circle") is None


def test_feature_set_sizes() -> None:
    artboard = Artboard(width=800, height=600)
    assert extract_features("add a circle radius 25").explicit_size("circle", artboard) == {"r": 25.0}
    assert extract_features("add a small circle").size_for("circle", artboard) == {"r": 36.0}
    assert extract_features("add a circle").size_for("circle", artboard) == {"r": 60.0}
    assert extract_features("add a rect width 200 height 50").size_for("rect", artboard) == {
        "width": 200.0,
        "height": 50.0,
    }
    assert extract_features("add a square 90").size_for("rect", artboard) == {"width": 90.0, "height": 90.0}
    assert extract_features("add a circle").explicit_size("circle", artboard) == {}


def test_resolve_position_edges_for_circle_and_rect() -> None:
    artboard = {"width": 800, "height": 600}
    circle = extract_features("move it left and down")
    assert resolve_position("circle", artboard, {"r": 20}, circle) == (60, 540)

    rect = extract_features("put it on the right top")
    assert resolve_position("rect", artboard, {"width": 100, "height": 50}, rect) == (660, 40)


def test_resolve_position_opposites_resolve_first_match() -> None:
    features = extract_features("left right up down")
    assert resolve_position("circle", {"width": 800, "height": 600}, {"r": 10}, features) == (50, 50)


def test_resolve_position_center_and_untouched() -> None:
    artboard = {"width": 800, "height": 600}
    centre = extract_features("center it")
    assert resolve_position("rect", artboard, {"width": 100, "height": 100}, centre, (5, 5)) == (350, 250)
    assert resolve_position("circle", artboard, {"r": 10}, extract_features("blue"), (5, 7)) == (5, 7)


def test_edit_vocabulary_does_not_fire_scene_or_fade_flags() -> None:
    colour = detect_keywords("make it dark blue")
    assert colour["night"] is False
    assert colour["dark"] is True
    assert detect_keywords("set opacity 50")["fade"] is False
    assert detect_keywords("make it transparent")["fade"] is False
    assert detect_keywords("fade it out")["fade"] is True
    star = detect_keywords("draw a star")
    assert star["stars"] is False
    assert star["starShape"] is True
    assert detect_keywords("a starry night")["stars"] is True
    assert detect_keywords("put it next to the text field")["meadow"] is False
    assert detect_keywords("wildflower fields")["meadow"] is True


def test_apostrophes_are_not_quotes() -> None:
    assert extract_text_content("don't animate it's text") is None
    assert extract_text_content("add label 'Go now' please") == "Go now"
    assert extract_text_content("it's a 'Big Day' banner") == "Big Day"
