"""
Configuration for the deck layout pipeline.

Every threshold and constant used by the segmenter, analyzer, chart inference
and layout optimizer lives here and is passed explicitly to each component.
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, Any, List, Optional
import yaml

from .types import CanvasSize

DEFAULT_CHART_PALETTE = [
    "4472C4",  # Blue
    "ED7D31",  # Orange
    "A5A5A5",  # Gray
    "FFC000",  # Yellow
    "5B9BD5",  # Light Blue
    "70AD47",  # Green
    "264478",  # Dark Blue
    "9E480E",  # Brown
    "636363",  # Dark Gray
    "997300",  # Dark Yellow
]

DEFAULT_BLOCK_WEIGHTS = {
    "text": 0.3,
    "image": 0.8,
    "chart": 0.9,
    "table": 0.7,
    "list": 0.5,
    "quote": 0.4,
}


@dataclass
class Config:
    """
    Deck layout configuration.

    Canvas sizes are in canvas units (inches for the slide presets); the
    default block area estimates (image 4, chart/table 6, other 2) use the
    same units squared.
    """

    # Output
    version: str = "1.0.0"

    # Canvas (16:9 slide, inches)
    canvas_width: float = 10.0
    canvas_height: float = 5.625

    # Segmenter
    min_slides: int = 1
    max_slides: int = 50
    base_words_per_slide: float = 100.0
    complexity_words_discount: float = 50.0
    min_words_per_slide: float = 20.0

    # Chart inference
    chart_palette: List[str] = field(default_factory=lambda: list(DEFAULT_CHART_PALETTE))
    chart_theme: str = "colorful"
    pie_max_rows: int = 8
    comparison_max_rows: int = 12
    dense_min_rows: int = 20
    correlation_threshold: float = 0.3
    show_values_max_rows: int = 10

    # Layout thresholds
    max_density: float = 0.8
    min_balance: float = 0.5
    min_readability: float = 0.6
    min_white_space: float = 0.2
    min_hierarchy: float = 0.5

    # Layout corrections
    density_shrink: float = 0.9
    white_space_margin: float = 0.1
    hierarchy_step: float = 0.1
    min_hierarchy_scale: float = 0.1
    anchor_default_fraction: float = 0.25
    golden_ratio: float = 1.618
    summary_min_chars: int = 100
    summary_sentences: int = 3
    bullet_max_items: int = 5
    long_sentence_words: int = 20

    # Content analyzer
    max_topics: int = 10
    max_key_points: int = 15

    # Block builder
    block_weights: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_BLOCK_WEIGHTS))

    @property
    def canvas(self) -> CanvasSize:
        return CanvasSize(self.canvas_width, self.canvas_height)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create Config from dictionary."""
        return cls(**data)

    def save_yaml(self, path: str) -> None:
        """Save configuration to YAML file."""
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, allow_unicode=True)

    @classmethod
    def load_yaml(cls, path: str) -> "Config":
        """Load configuration from YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    def validate(self) -> None:
        """Validate configuration settings."""
        if self.canvas_width <= 0 or self.canvas_height <= 0:
            raise ValueError(
                f"Invalid canvas: {self.canvas_width}x{self.canvas_height}. Both sides must be positive."
            )

        if not (1 <= self.min_slides <= self.max_slides):
            raise ValueError(
                f"Invalid slide limits: min_slides={self.min_slides}, max_slides={self.max_slides}."
            )

        if self.min_words_per_slide <= 0:
            raise ValueError(f"min_words_per_slide must be positive, got {self.min_words_per_slide}")

        if len(self.chart_palette) == 0:
            raise ValueError("chart_palette must contain at least one color.")

        for name in ("max_density", "min_balance", "min_readability", "min_white_space",
                     "min_hierarchy", "correlation_threshold", "anchor_default_fraction"):
            value = getattr(self, name)
            if not (0.0 <= value <= 1.0):
                raise ValueError(f"{name} must be between 0.0-1.0, got {value}")

        if not (0.0 < self.density_shrink <= 1.0):
            raise ValueError(f"density_shrink must be in (0, 1], got {self.density_shrink}")

        if not (0.0 <= self.white_space_margin < 0.5):
            raise ValueError(f"white_space_margin must be in [0, 0.5), got {self.white_space_margin}")

        if self.golden_ratio <= 1.0:
            raise ValueError(f"golden_ratio must be greater than 1, got {self.golden_ratio}")

        unknown = set(self.block_weights) - set(DEFAULT_BLOCK_WEIGHTS)
        if unknown:
            raise ValueError(f"Unknown block types in block_weights: {sorted(unknown)}")


# Preset configurations
SLIDE_16_9_CONFIG = Config()

SLIDE_4_3_CONFIG = Config(
    canvas_width=10.0,
    canvas_height=7.5,
)

A4_PAGE_CONFIG = Config(
    canvas_width=8.27,
    canvas_height=11.69,
    base_words_per_slide=300.0,  # Pages hold more text than slides
    complexity_words_discount=100.0,
    min_words_per_slide=60.0,
)


def load_config(path: Optional[str] = None, preset: Optional[str] = None) -> Config:
    """
    Load configuration from file or preset.

    Args:
        path: Path to YAML config file
        preset: Preset name ('slide_16_9', 'slide_4_3', 'a4_page')

    Returns:
        Validated Config instance

    Examples:
        >>> config = load_config(preset='a4_page')
        >>> config = load_config(path='configs/custom.yaml')
    """
    if path:
        config = Config.load_yaml(path)
    elif preset:
        presets = {
            "slide_16_9": SLIDE_16_9_CONFIG,
            "slide_4_3": SLIDE_4_3_CONFIG,
            "a4_page": A4_PAGE_CONFIG,
        }
        if preset.lower() not in presets:
            raise ValueError(f"Unknown preset: {preset}. Available: {list(presets.keys())}")
        config = Config.from_dict(presets[preset.lower()].to_dict())
    else:
        config = Config()  # Default config

    config.validate()
    return config
