from __future__ import annotations


class DecodeError(Exception):
    """Save file could not be turned into a SaveState (envelope, base64, AES or JSON)."""


class ConfigurationError(Exception):
    """Catalog and evaluator disagree, e.g. an unknown parsing-info tag."""
