"""PostgreSQL addon catalogue (`addon_builds.json`)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from core.domain.models import AddonBuild
from core.errors import AddonNotFound


def load_addon_builds(path: Path) -> list[AddonBuild]:
    data = json.loads(path.read_text(encoding="utf-8"))
    return [AddonBuild.model_validate(item) for item in data]


def addon_for(core_version: str, builds: Iterable[AddonBuild], addon: str = "postgresql") -> str:
    """Jar name of `addon` for a full GoCD version.

    The catalogue may list a version more than once; the last entry wins.
    """

    matches = [b for b in builds if b.gocd_version == core_version and addon in b.addons]
    if not matches:
        raise AddonNotFound(core_version)
    return matches[-1].addons[addon]
