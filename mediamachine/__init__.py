"""
MediaMachine - TV show discovery and Sonarr library management
"""

__version__ = "1.0.0"
