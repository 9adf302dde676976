"""
Configuration package for the Manglanam storefront.
Exports settings from settings.py for easy import
"""
from .settings import settings

__all__ = ["settings"]
