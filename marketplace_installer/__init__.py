"""Marketplace Installer - unattended installer for the Spicetify Marketplace."""

__version__ = "1.0.0"
