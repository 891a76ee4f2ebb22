"""Build configuration threaded through every geometry-generating call."""

from __future__ import annotations

from dataclasses import dataclass, replace

from .errors import ConfigError

QUALITY = 128
DRAFT_QUALITY = 16


@dataclass(frozen=True)
class BuildConfig:
    """Settings for a single model build.

    Attributes:
        quality: Number of samples used for every generated loop.
        engine: Name of the boolean engine in :mod:`borecad.boolean`.
        backend: Boolean backend the engine should dispatch to.
        segment_tolerance: Slack allowed by the segment padding check (mm).
        vertex_digits: Decimal digits kept when welding mesh vertices.
    """

    quality: int = QUALITY
    engine: str = "trimesh"
    backend: str | None = "manifold"
    segment_tolerance: float = 1e-3
    vertex_digits: int = 9

    def __post_init__(self):
        if isinstance(self.quality, bool) or not isinstance(self.quality, int):
            raise ConfigError(f"quality must be an integer, got {self.quality!r}")
        if self.quality < 3:
            raise ConfigError(f"quality must be at least 3, got {self.quality}")
        if self.segment_tolerance < 0:
            raise ConfigError(
                f"segment_tolerance must not be negative, got {self.segment_tolerance}"
            )
        if self.vertex_digits < 1:
            raise ConfigError(f"vertex_digits must be positive, got {self.vertex_digits}")

    @classmethod
    def draft(cls, **kwargs) -> "BuildConfig":
        """Fast preview configuration with coarse sampling."""
        return cls(quality=DRAFT_QUALITY, **kwargs)

    def with_quality(self, quality: int) -> "BuildConfig":
        return replace(self, quality=quality)


DEFAULT_CONFIG = BuildConfig()


def resolve(config: BuildConfig | None) -> BuildConfig:
    """Return ``config`` or the default configuration when ``None``."""
    return DEFAULT_CONFIG if config is None else config
