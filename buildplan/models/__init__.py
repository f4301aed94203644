"""Data models for buildplan."""

from .environment import CREDENTIAL_KEYS, BuildEnvironment, BuildType
from .plan import ResolvedPlan, SigningIdentity, SigningSource
from .profile import BUILTIN_PROFILES, DEFAULT_PROFILE, ConfigurationProfile

__all__ = [
    "CREDENTIAL_KEYS",
    "BuildEnvironment",
    "BuildType",
    "ResolvedPlan",
    "SigningIdentity",
    "SigningSource",
    "BUILTIN_PROFILES",
    "DEFAULT_PROFILE",
    "ConfigurationProfile",
]
