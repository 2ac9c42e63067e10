"""
Content rating access control for wiki-style media platforms.
"""
__version__ = "0.3.0"
