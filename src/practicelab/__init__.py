"""
Interview practice engine: skill relevance scoring and technical exercise routing.
"""

__version__ = "0.1.0"
