"""Exception types raised by histomorph."""


class HistomorphError(Exception):
    """Base class for recoverable per-unit analysis failures."""


class DegenerateCurveError(HistomorphError, ValueError):
    """A curve has too few points to carry a measurement."""


class AnnotationError(HistomorphError, ValueError):
    """An annotation document does not have the expected structure."""
