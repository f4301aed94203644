"""
buildplan: Deterministic build-variant resolution for Flutter Android apps.

Turns the inputs an Android/Flutter build reads at configuration time
(property files, environment, selected build type) into a fully resolved,
immutable build plan, and renders that plan back into Gradle Kotlin DSL.
"""

__version__ = "1.0.0"
__author__ = "buildplan Team"
