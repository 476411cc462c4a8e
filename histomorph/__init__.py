"""Dynamic histomorphometry of double-labeled bone cross-sections."""

__version__ = "0.1.0"
