"""Configuration profile lookup."""

from .registry import ProfileRegistry, load_profile_file

__all__ = ["ProfileRegistry", "load_profile_file"]
