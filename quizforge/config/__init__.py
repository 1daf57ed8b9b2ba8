"""Configuration module: exports Settings and load_config."""

from quizforge.config.loader import load_config
from quizforge.config.settings import Settings

__all__ = ["Settings", "load_config"]
