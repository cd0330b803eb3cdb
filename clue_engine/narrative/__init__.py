"""Narrative flavor text."""

from .service import (
    FALLBACK_CONCLUSION_ERROR_LOST,
    FALLBACK_CONCLUSION_ERROR_WON,
    FALLBACK_CONCLUSION_LOST,
    FALLBACK_CONCLUSION_WON,
    FALLBACK_HINT,
    FALLBACK_HINT_ERROR,
    FALLBACK_INTRO,
    NarrativeService,
)

__all__ = [
    "FALLBACK_CONCLUSION_ERROR_LOST",
    "FALLBACK_CONCLUSION_ERROR_WON",
    "FALLBACK_CONCLUSION_LOST",
    "FALLBACK_CONCLUSION_WON",
    "FALLBACK_HINT",
    "FALLBACK_HINT_ERROR",
    "FALLBACK_INTRO",
    "NarrativeService",
]
