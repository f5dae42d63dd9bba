"""Workspace root resolution and the home-directory guard."""

from pathlib import Path

WORKSPACE_DIRNAME = ".clawtutor"
LEGACY_WORKSPACE_DIRNAME = ".codemachine"


def resolve_workspace_root(cwd: Path) -> Path:
    """Resolve the project workspace root under ``cwd``.

    Preference order:
    1. ``.clawtutor`` if present
    2. ``.codemachine`` if present (projects created before the rename)
    3. ``.clawtutor`` as the target for a new workspace

    Only checks existence; the directory is created by
    ``ensure_workspace_structure``.
    """
    root = Path(cwd) / WORKSPACE_DIRNAME
    legacy_root = Path(cwd) / LEGACY_WORKSPACE_DIRNAME

    if root.exists():
        return root
    if legacy_root.exists():
        return legacy_root
    return root


def is_home_directory(target: Path, home: Path) -> bool:
    """Check whether ``target`` is the user's home directory.

    Both paths are resolved with symlinks followed. A path that cannot be
    resolved (for instance a ``--dir`` that does not exist yet) is treated
    as "not home".
    """
    try:
        resolved_target = Path(target).resolve(strict=True)
        resolved_home = Path(home).resolve(strict=True)
    except (OSError, RuntimeError):
        return False
    return resolved_target == resolved_home
