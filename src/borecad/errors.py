"""Exception hierarchy for borecad."""


class BoreCADError(Exception):
    """Base exception for all borecad errors."""

    pass


class ConfigError(BoreCADError, ValueError):
    """Invalid build configuration value."""

    pass


class GeometryError(BoreCADError, ValueError):
    """Invalid geometric input."""

    pass


class TopologyMismatchError(GeometryError):
    """Cross-sections handed to the extrusion builder disagree on point count."""

    def __init__(self, level: int, expected: int, actual: int) -> None:
        self.level = level
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"cross-section {level} has {actual} points, expected {expected}"
        )


class CompositionError(BoreCADError, ValueError):
    """Misuse of the solid composition tree."""

    pass


class InsufficientPaddingError(BoreCADError):
    """A segment clip truncated material; the padding or radius is too small."""

    def __init__(self, axis: str, expected: float, actual: float) -> None:
        self.axis = axis
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"need more padding for construction: {axis} extent {actual:.6g} "
            f"does not fit expected {expected:.6g}"
        )


class EngineError(BoreCADError, RuntimeError):
    """The boolean engine is missing, misconfigured or failed."""

    pass


class GeometryNotImplementedError(BoreCADError, NotImplementedError):
    """Geometric operation with no backing implementation."""

    pass
