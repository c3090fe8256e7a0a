# resume/__init__.py
"""
Resume tailoring core: diffing, caching, rate limiting and the generation pipeline
"""

__version__ = "1.0.0"
