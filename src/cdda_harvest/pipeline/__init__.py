"""
Harvest pipeline: per-release processing and the run orchestrator.
"""

from .release import LocaleTables, ReleaseBuild, ReleaseProcessor, catalog_path
from .service import HarvestReport, HarvestService

__all__ = [
    "LocaleTables",
    "ReleaseBuild",
    "ReleaseProcessor",
    "catalog_path",
    "HarvestReport",
    "HarvestService",
]
