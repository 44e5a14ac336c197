"""Configuration management for quillmind."""

from .manager import DEFAULT_CONFIG, load_config

__all__ = [
    "DEFAULT_CONFIG",
    "load_config",
]
