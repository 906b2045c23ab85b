import pytest
from pydantic import ValidationError

from leaffall.animation.flicker import FlickerConfig
from leaffall.graphics.overlay import OverlayPalette
from leaffall.main import build_parser
from leaffall.settings import EffectSettings, Settings, get_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("LEAFFALL_DEBUG", "LEAFFALL_EFFECT__TOTAL_DURATION_MS", "LEAFFALL_DISPLAY__CELL_SIZE"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults_match_field_defaults():
    settings = Settings()

    assert settings.effect.to_config() == FlickerConfig()
    assert settings.display.to_palette() == OverlayPalette()
    assert settings.display.to_intro_config().cell_size == 2
    assert settings.effect.seed is None


def test_nested_env_override(monkeypatch):
    monkeypatch.setenv("LEAFFALL_EFFECT__TOTAL_DURATION_MS", "6000")
    monkeypatch.setenv("LEAFFALL_DISPLAY__CELL_SIZE", "4")
    monkeypatch.setenv("LEAFFALL_DEBUG", "true")

    settings = Settings()

    assert settings.effect.total_duration_ms == 6000.0
    assert settings.effect.to_config().total_duration_ms == 6000.0
    assert settings.display.cell_size == 4
    assert settings.debug


def test_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("LEAFFALL_EFFECT__BORDER_THICKNESS=3\n")

    assert Settings().effect.border_thickness == 3


def test_out_of_range_values_rejected():
    with pytest.raises(ValidationError):
        EffectSettings(contagion_strength=2.0)
    with pytest.raises(ValidationError):
        EffectSettings(total_duration_ms=0)


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_cli_options():
    args = build_parser().parse_args(["--width", "640", "--cell-size", "3", "--seed", "5", "--debug"])

    assert args.width == 640
    assert args.height is None
    assert args.cell_size == 3
    assert args.seed == 5
    assert args.debug
