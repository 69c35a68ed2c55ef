from __future__ import annotations

from typing import List
import os

from ..base_module import SiteCheck
from ..issues import SizeRecord


class StaticSizeCheck(SiteCheck):
    """Raw on-disk size of the main stylesheet and script bundle against their budgets."""

    title = "static sizes"
    unit = "asset(s) failing"

    def measure(self, rel_path: str, asset_type: str) -> SizeRecord:
        full_path = os.path.join(self.config.assets_root, rel_path)
        if not os.path.isfile(full_path):
            return SizeRecord(file=rel_path, missing=True)
        size = os.path.getsize(full_path)
        limit = self.config.size_thresholds.get(asset_type)
        if limit is None:
            raise ValueError(f"No size threshold configured for asset type '{asset_type}'")
        return SizeRecord(file=rel_path, size=size, limit=limit, ok=size <= limit)

    def run(self) -> List[SizeRecord]:
        return [self.measure(path, asset_type) for path, asset_type in self.config.assets]

    def failure_count(self, results: List[SizeRecord]) -> int:
        return sum(1 for r in results if r.missing or not r.ok)
