"""Gradle build file rendering."""

from .service import GradleRenderer, RenderedBuild

__all__ = ["GradleRenderer", "RenderedBuild"]
