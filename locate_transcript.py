"""Find the newest Claude Code transcript recorded for a working directory."""
from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

AGENT_PREFIX = "agent-"


class TranscriptNotFoundError(Exception):
    pass


def default_projects_dir() -> Path:
    return Path.home() / ".claude" / "projects"


def normalize_project_name(cwd: Path) -> str:
    normalized = str(cwd).lstrip(os.sep)
    normalized = normalized.replace(os.sep, "-").replace(".", "-")
    return "-" + normalized


def _list_project_dirs(projects_dir: Path) -> List[Path]:
    try:
        return sorted(child for child in projects_dir.iterdir() if child.is_dir())
    except OSError as exc:
        raise TranscriptNotFoundError(f"failed to read Claude projects directory {projects_dir}: {exc}") from exc


def find_project_dir(projects_dir: Path, cwd: Path) -> Path:
    """Exact name match first, then the first directory ending with the project name.

    The suffix fallback is a heuristic and may pick the wrong directory when
    several projects share a basename.
    """
    candidates = _list_project_dirs(projects_dir)
    expected = normalize_project_name(cwd)
    for candidate in candidates:
        if candidate.name == expected:
            return candidate
    project_name = cwd.name.replace(".", "-")
    if project_name:
        for candidate in candidates:
            if candidate.name.endswith(project_name):
                return candidate
    raise TranscriptNotFoundError(f"no Claude project directory found for: {cwd} (tried: {expected})")


def find_latest_transcript(project_dir: Path) -> Path:
    latest: Optional[Path] = None
    latest_mtime = 0.0
    try:
        children = sorted(project_dir.iterdir())
    except OSError as exc:
        raise TranscriptNotFoundError(
            f"no conversation logs found for this project (checked: {project_dir})"
        ) from exc
    for child in children:
        if child.suffix != ".jsonl" or child.name.startswith(AGENT_PREFIX):
            continue
        try:
            if not child.is_file():
                continue
            mtime = child.stat().st_mtime
        except OSError:
            continue
        if latest is None or mtime > latest_mtime:
            latest = child
            latest_mtime = mtime
    if latest is None:
        raise TranscriptNotFoundError(f"no conversation logs found in {project_dir}")
    return latest


def find_latest_conversation(cwd: Optional[Path] = None, projects_dir: Optional[Path] = None) -> Path:
    cwd = Path(cwd) if cwd is not None else Path.cwd()
    projects_dir = Path(projects_dir) if projects_dir is not None else default_projects_dir()
    return find_latest_transcript(find_project_dir(projects_dir, cwd))
