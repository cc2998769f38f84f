"""Load signature templates and their static resources from a directory.

Expected layout::

    <templates_dir>/<name>.htm
    <templates_dir>/<name>.rtf
    <templates_dir>/<name>.txt
    <templates_dir>/<name>_files/...   images and other resources
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from sigdeploy.core.exceptions import LocalStateUnreadable
from sigdeploy.models.signature import OutputFormat, TemplateSet

logger = logging.getLogger(__name__)


def load_template_set(
    templates_dir: Path,
    name: str = "signature",
    formats: Iterable[str] = ("htm", "rtf", "txt"),
) -> TemplateSet:
    templates: dict[OutputFormat, str] = {}
    for fmt in (OutputFormat(f) for f in formats):
        path = templates_dir / f"{name}.{fmt.value}"
        if not path.is_file():
            logger.warning("Template %s missing, format %s skipped", path, fmt.value)
            continue
        try:
            templates[fmt] = path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as exc:
            raise LocalStateUnreadable(f"Template {path} unreadable: {exc}") from exc

    if not templates:
        raise LocalStateUnreadable(f"No signature templates found in {templates_dir}")

    resources: dict[str, bytes] = {}
    resource_dir = templates_dir / f"{name}_files"
    if resource_dir.is_dir():
        for path in sorted(p for p in resource_dir.rglob("*") if p.is_file()):
            try:
                resources[path.relative_to(resource_dir).as_posix()] = path.read_bytes()
            except OSError as exc:
                raise LocalStateUnreadable(f"Resource {path} unreadable: {exc}") from exc

    logger.debug("Loaded %d templates and %d resources", len(templates), len(resources))
    return TemplateSet(templates=templates, resources=resources)
