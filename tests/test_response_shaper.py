from remote_config.models.content import ConfigEntry
from remote_config.services.response_shaper import decode_value, group_by_screen


def entry(screen, key, value, type="text"):
    return ConfigEntry(app="customer", screen=screen, key=key, value=value, type=type)


def test_decode_value_parses_json_entries():
    decoded = decode_value(entry("home", "banner", '{"a":1}', type="json"))
    assert decoded.value == {"a": 1}
    assert decoded.raw is False


def test_decode_value_falls_back_to_raw_string_for_malformed_json():
    decoded = decode_value(entry("home", "banner", "{bad", type="json"))
    assert decoded.value == "{bad"
    assert decoded.raw is True


def test_decode_value_passes_text_and_image_through():
    assert decode_value(entry("home", "title", '{"a":1}')).value == '{"a":1}'
    image = decode_value(entry("home", "hero", "https://cdn.example.com/hero.png", type="image"))
    assert image.value == "https://cdn.example.com/hero.png"
    assert image.raw is True


def test_group_by_screen_nests_keys_under_screens():
    grouped = group_by_screen([
        entry("home", "title", "Hello"),
        entry("home", "banner", '{"show":true}', type="json"),
        entry("auth", "login_cta", "Sign in"),
    ])
    assert grouped == {
        "home": {"title": "Hello", "banner": {"show": True}},
        "auth": {"login_cta": "Sign in"},
    }


def test_group_by_screen_skips_entries_without_screen_or_key():
    grouped = group_by_screen([
        entry(None, "title", "Hello"),
        entry("home", None, "Hello"),
        entry("", "title", "Hello"),
        entry("home", "subtitle", "World"),
    ])
    assert grouped == {"home": {"subtitle": "World"}}


def test_group_by_screen_empty_input():
    assert group_by_screen([]) == {}
