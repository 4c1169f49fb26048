"""Cross-repository crate dependency linting and graphing."""

__version__ = "0.1.0"
