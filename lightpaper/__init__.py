"""Lightpaper - solar light-state wallpaper selector."""

__version__ = "0.1.0"
