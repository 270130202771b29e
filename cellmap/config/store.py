from __future__ import annotations

import logging
from collections.abc import Mapping

from ..models.config_models import DashboardConfig
from .loader import dashboard_from_flat, dashboard_to_flat, default_dashboard_config

"""Runtime cell-mapping store.

Holds the current DashboardConfig snapshot. Writers swap in a new immutable
snapshot, readers keep whatever snapshot they took, so an extraction never
observes a half-applied update.
"""

__all__ = [
    "CellMapStore",
]

logger = logging.getLogger(__name__)


class CellMapStore:
    """Get-all / set-all access to the flat dotted-key configuration."""

    def __init__(self, initial: DashboardConfig | None = None) -> None:
        self._snapshot = initial if initial is not None else default_dashboard_config()

    def snapshot(self) -> DashboardConfig:
        return self._snapshot

    def get_all(self) -> dict[str, str]:
        return dashboard_to_flat(self._snapshot)

    def set_all(self, mappings: Mapping[str, str], icons: Mapping[str, str] | None = None) -> DashboardConfig:
        """Apply a flat mapping and return the new snapshot.

        Keys absent from ``mappings`` or mapped to "" keep their value; a
        known entity keeps its position and icon, a new one is appended.

        Raises:
            ConfigError: If any key or value is invalid. The current snapshot
                is left untouched in that case.
        """
        updated = dashboard_from_flat(mappings, icons=icons, base=self._snapshot)
        self._snapshot = updated
        logger.debug(f"cell mappings updated: {len(mappings)} keys")
        return updated

    def reset(self) -> DashboardConfig:
        self._snapshot = default_dashboard_config()
        return self._snapshot
