"""Theme preference — the second key in the blob store."""

from __future__ import annotations

import logging

from goaltrack.config import settings
from goaltrack.engine.connector import BlobStore
from goaltrack.engine.models import ThemePreference

logger = logging.getLogger(__name__)

DEFAULT_THEME = ThemePreference.auto


async def load_theme(blob_store: BlobStore) -> ThemePreference:
    """Stored theme, or `auto` when missing, unknown or unreadable."""
    try:
        raw = await blob_store.get(settings.theme_storage_key)
    except Exception:
        logger.exception("Error loading theme")
        return DEFAULT_THEME
    if raw is None:
        return DEFAULT_THEME
    try:
        return ThemePreference(raw)
    except ValueError:
        logger.warning("Ignoring unknown stored theme %r", raw)
        return DEFAULT_THEME


async def save_theme(blob_store: BlobStore, theme: ThemePreference) -> ThemePreference:
    try:
        await blob_store.set(settings.theme_storage_key, theme.value)
    except Exception:
        logger.exception("Error saving theme")
    return theme


async def clear_theme(blob_store: BlobStore) -> None:
    try:
        await blob_store.delete(settings.theme_storage_key)
    except Exception:
        logger.exception("Error clearing theme")
