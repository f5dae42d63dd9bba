"""Initialization logic for the clawtutor workspace directory structure."""

import logging
from pathlib import Path

from clawtutor.config.workspace import resolve_workspace_root

logger = logging.getLogger(__name__)

SPECIFICATION_FILENAME = "specifications.md"

SPECIFICATION_TEMPLATE = """\
# Project specification

Describe what you want the agents to build, then run /start.
"""


def get_default_spec_path(cwd: Path) -> Path:
    """Return the default specification file for the workspace under ``cwd``."""
    return resolve_workspace_root(cwd) / "inputs" / SPECIFICATION_FILENAME


def ensure_workspace_structure(cwd: Path) -> Path:
    """Create the workspace directory structure under ``cwd``.

    Creates:
        <root>/
        <root>/logs/
        <root>/inputs/specifications.md (template)
        <root>/agents/
        <root>/.gitignore (with logs/ ignored)

    Existing files are never overwritten. Returns the workspace root.
    """
    root = resolve_workspace_root(cwd)
    inputs_dir = root / "inputs"
    gitignore_path = root / ".gitignore"
    spec_path = inputs_dir / SPECIFICATION_FILENAME

    for directory in (root / "logs", inputs_dir, root / "agents"):
        directory.mkdir(parents=True, exist_ok=True)

    if not gitignore_path.exists():
        gitignore_path.write_text("logs/\n")

    if not spec_path.exists():
        spec_path.write_text(SPECIFICATION_TEMPLATE)

    logger.debug("Workspace structure ensured at %s", root)
    return root
