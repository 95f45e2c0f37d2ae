"""Installer configuration loading and schemas."""
