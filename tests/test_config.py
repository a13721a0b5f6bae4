import pytest

from deckflow.core.config import A4_PAGE_CONFIG, Config, load_config
from deckflow.core.types import CanvasSize


def test_default_config_is_valid():
    config = load_config()
    assert config.canvas == CanvasSize(10.0, 5.625)
    assert len(config.chart_palette) == 10


def test_presets():
    config = load_config(preset="A4_PAGE")
    assert config.canvas == CanvasSize(8.27, 11.69)
    config.base_words_per_slide = 1.0
    # presets are copied, never handed out
    assert A4_PAGE_CONFIG.base_words_per_slide == 300.0

    assert load_config(preset="slide_4_3").canvas_height == 7.5

    with pytest.raises(ValueError):
        load_config(preset="poster")


@pytest.mark.parametrize("field,value", [
    ("canvas_width", 0),
    ("max_density", 1.5),
    ("min_slides", 0),
    ("golden_ratio", 1.0),
    ("density_shrink", 0.0),
    ("chart_palette", []),
    ("block_weights", {"video": 0.5}),
])
def test_validate_rejects_bad_values(field, value):
    config = Config()
    setattr(config, field, value)
    with pytest.raises(ValueError):
        config.validate()


def test_yaml_round_trip(tmp_path):
    path = tmp_path / "deck.yaml"
    config = Config(canvas_width=13.33, canvas_height=7.5, max_slides=20)
    config.save_yaml(str(path))

    loaded = load_config(path=str(path))
    assert loaded == config
    assert loaded.to_dict()["max_slides"] == 20


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert Config.load_yaml(str(path)) == Config()
