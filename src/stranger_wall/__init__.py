"""
Stranger Wall - renders incoming text on an addressable LED strip,
one letter per pixel.
"""

__version__ = "0.1.0"
