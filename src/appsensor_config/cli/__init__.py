"""Command-line interface module for the AppSensor server configuration reader.

This module provides CLI tools for displaying and checking server
configuration documents.
"""

from .main import main

__all__ = ["main"]
