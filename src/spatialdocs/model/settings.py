"""
User Preferences
Thin wrapper around QSettings (INI format, see app.create_app) for the values
the user edits in the settings dialog.
"""
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QSettings

from spatialdocs.config import ZOOM_MIN, ZOOM_MAX

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-3-flash-preview"


class AppSettings:
    KEY_API_KEY = "assistant/api_key"
    KEY_MODEL = "assistant/model"
    KEY_VIEWER_ZOOM = "viewer/zoom"

    def __init__(self, settings: Optional[QSettings] = None) -> None:
        self._settings = settings if settings is not None else QSettings()

    @property
    def api_key(self) -> str:
        return str(self._settings.value(self.KEY_API_KEY, "", type=str))

    @api_key.setter
    def api_key(self, value: str) -> None:
        value = value.strip()
        if value:
            self._settings.setValue(self.KEY_API_KEY, value)
        else:
            # An empty key clears the stored one
            self._settings.remove(self.KEY_API_KEY)

    @property
    def model(self) -> str:
        return str(self._settings.value(self.KEY_MODEL, DEFAULT_MODEL, type=str)) or DEFAULT_MODEL

    @model.setter
    def model(self, value: str) -> None:
        self._settings.setValue(self.KEY_MODEL, value or DEFAULT_MODEL)

    @property
    def viewer_zoom(self) -> float:
        try:
            zoom = float(self._settings.value(self.KEY_VIEWER_ZOOM, 1.0))
        except (TypeError, ValueError):
            logger.warning("Stored viewer zoom is not a number, using 1.0.")
            return 1.0
        return min(max(zoom, ZOOM_MIN), ZOOM_MAX)

    @viewer_zoom.setter
    def viewer_zoom(self, value: float) -> None:
        self._settings.setValue(self.KEY_VIEWER_ZOOM, float(value))

    def sync(self) -> None:
        self._settings.sync()
