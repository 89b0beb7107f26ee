"""Fitally AI - multimodal health activity analysis service."""

__version__ = "1.0.0"
