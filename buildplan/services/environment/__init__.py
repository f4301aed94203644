"""Build environment loading."""

from .properties import parse_properties
from .service import EnvironmentLoader

__all__ = ["EnvironmentLoader", "parse_properties"]
