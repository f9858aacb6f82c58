"""Resume enhancement: document extraction, AI rewriting, canonical schema."""

__version__ = "0.1.0"
