"""LifeOS: a personal assistant that drives Gemini and Claude through one tool catalog."""

__version__ = "0.1.0"
