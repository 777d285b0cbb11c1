"""
Configuration for the chord sheet extractor
"""

from .extraction_config import ExtractionConfig

__all__ = ['ExtractionConfig']
