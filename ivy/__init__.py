"""
Ivy: conversational assistant backend for a published writing archive.
"""

__version__ = "0.1.0"
