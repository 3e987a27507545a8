"""Database model type definitions."""

from src.models.profile import SUMMARY_COLUMNS, Profile, ProfileSummary, ProfileUpdate

__all__ = [
    "Profile",
    "ProfileSummary",
    "ProfileUpdate",
    "SUMMARY_COLUMNS",
]
