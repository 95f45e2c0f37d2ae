"""Core installation components."""
