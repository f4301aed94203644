"""Services package for buildplan."""

from .environment import EnvironmentLoader
from .profiles import ProfileRegistry, load_profile_file
from .render import GradleRenderer, RenderedBuild
from .resolver import resolve

__all__ = [
    "EnvironmentLoader",
    "ProfileRegistry",
    "load_profile_file",
    "GradleRenderer",
    "RenderedBuild",
    "resolve",
]
