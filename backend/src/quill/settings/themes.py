"""Installed theme discovery and annotation for the ``availableThemes`` entry."""

import json
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ..core.logging import get_logger

logger = get_logger(__name__)

NOT_A_PACKAGE = re.compile(r"^\.|_messages|README\.md", re.IGNORECASE)


def discover_themes(themes_dir: str | Path) -> dict[str, dict[str, Any]]:
    """List theme packages under ``themes_dir``.

    Returns ``{name: {"package.json": <parsed package.json or None>}}`` sorted by
    name. A missing directory yields an empty mapping.
    """
    root = Path(themes_dir)
    if not root.is_dir():
        logger.debug(f"Themes directory does not exist: {root}")
        return {}

    themes: dict[str, dict[str, Any]] = {}
    for entry in sorted(root.iterdir(), key=lambda p: p.name):
        if not entry.is_dir():
            continue
        package = None
        package_file = entry / "package.json"
        if package_file.is_file():
            try:
                package = json.loads(package_file.read_text(encoding="utf-8"))
            except ValueError as e:
                logger.warning(f"Ignoring malformed package.json for theme '{entry.name}': {e}")
        themes[entry.name] = {"package.json": package}
    return themes


def filter_packages(packages: Mapping[str, Any], active: str | list[str] | None = None) -> list[dict[str, Any]]:
    """Annotate installed packages with their ``active`` flag.

    Hidden entries and non-package files are skipped. ``active`` may be a
    single package name or a list of names.
    """
    if isinstance(active, str):
        active_names = {active}
    else:
        active_names = set(active or [])

    result = []
    for name, package in packages.items():
        if NOT_A_PACKAGE.search(name):
            continue
        package_json = package.get("package.json") if isinstance(package, Mapping) else None
        result.append(
            {
                "name": name,
                "package": package_json or False,
                "active": name in active_names,
            }
        )
    return result
