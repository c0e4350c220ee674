"""Banner domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import NotFound


class BannerNotFound(NotFound):
    default_message = "Banner not found."
