"""Read-only workspace tools exposed to the agent-style adapter.

Every tool is scoped to a workspace root: paths are resolved against it and
anything that escapes (``..``, absolute paths elsewhere, symlinks pointing
out) is rejected with an ``error`` entry instead of being read. Tools never
raise for user-level problems; they return a dict the model can read.

``WorkspaceTools`` holds the plain implementations (directly testable);
``create_workspace_tools`` wraps them as Agents SDK function tools.
"""
from __future__ import annotations

import os
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from agents import FunctionTool, function_tool

DEFAULT_MAX_FILE_CHARS = 12_000
DEFAULT_MAX_LIST_RESULTS = 200
DEFAULT_MAX_SEARCH_RESULTS = 40
# files larger than this are skipped by search_files
MAX_SEARCH_FILE_BYTES = 2 * 1024 * 1024

_TRUNCATION_MARKER = "\n...<truncated>"


def _truncate_text(value: str, limit: int) -> tuple[str, bool]:
    if len(value) <= limit:
        return value, False
    return value[:limit] + _TRUNCATION_MARKER, True


def _is_hidden(part: str) -> bool:
    return part.startswith(".") and part not in (".", "..")


class WorkspaceTools:
    """File read / list / search helpers confined to ``root``."""

    def __init__(self, root: Union[str, Path, None] = None) -> None:
        self.root = Path(root or os.getcwd()).resolve()

    # ----- path safety -----
    def resolve_safe_path(self, path: str) -> Optional[Path]:
        """Resolve ``path`` under the root, or ``None`` when it escapes it."""
        candidate = (self.root / path).resolve()
        if candidate == self.root or self.root in candidate.parents:
            return candidate
        return None

    def relative(self, path: Path) -> str:
        rel = path.relative_to(self.root).as_posix()
        return rel if rel else "."

    def _outside(self) -> Dict[str, Any]:
        return {"error": f"Path is outside workspace root ({self.root})."}

    def _iter_files(self, start: Path):
        if start.is_file():
            yield start
            return
        for dirpath, dirnames, filenames in os.walk(start):
            dirnames[:] = sorted(d for d in dirnames if not _is_hidden(d))
            for name in sorted(filenames):
                if not _is_hidden(name):
                    yield Path(dirpath) / name

    # ----- tools -----
    def read_file(
        self,
        path: str,
        start_line: Optional[int] = None,
        end_line: Optional[int] = None,
        max_chars: Optional[int] = None,
    ) -> Dict[str, Any]:
        safe = self.resolve_safe_path(path)
        if safe is None:
            return self._outside()
        rel = self.relative(safe)
        try:
            contents = safe.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            return {"error": f"Failed to read file: {exc}", "path": rel}

        lines = contents.split("\n")
        start = max(1, start_line or 1)
        end = min(end_line if end_line is not None else len(lines), len(lines))
        if end < start:
            return {"error": "end_line must be greater than or equal to start_line.", "path": rel}

        numbered = "\n".join(f"{start + i}: {line}" for i, line in enumerate(lines[start - 1:end]))
        content, truncated = _truncate_text(numbered, max_chars or DEFAULT_MAX_FILE_CHARS)
        return {
            "path": rel,
            "content": content,
            "start_line": start,
            "end_line": end,
            "total_lines": len(lines),
            "truncated": truncated,
        }

    def list_files(self, path: str = ".", max_results: Optional[int] = None) -> Dict[str, Any]:
        safe = self.resolve_safe_path(path)
        if safe is None:
            return self._outside()
        if not safe.exists():
            return {"error": f"Path does not exist: {path}"}
        found = [self.relative(p) for p in self._iter_files(safe)]
        limit = max_results or DEFAULT_MAX_LIST_RESULTS
        files = found[:limit]
        return {
            "root": str(self.root),
            "files": files,
            "file_count": len(files),
            "total_matches": len(found),
            "truncated": len(found) > len(files),
        }

    def search_files(self, query: str, path: str = ".", max_results: Optional[int] = None) -> Dict[str, Any]:
        """Smart-case substring search; lines render as ``path:line:column:text``."""
        safe = self.resolve_safe_path(path)
        if safe is None:
            return self._outside()
        if not query:
            return {"error": "query must not be empty."}
        flags = 0 if any(ch.isupper() for ch in query) else re.IGNORECASE
        pattern = re.compile(re.escape(query), flags)
        matches: List[str] = []
        for file_path in self._iter_files(safe):
            try:
                if file_path.stat().st_size > MAX_SEARCH_FILE_BYTES:
                    continue
                text = file_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError):
                continue
            rel = self.relative(file_path)
            for lineno, line in enumerate(text.splitlines(), start=1):
                hit = pattern.search(line)
                if hit:
                    matches.append(f"{rel}:{lineno}:{hit.start() + 1}:{line.strip()}")
        limit = max_results or DEFAULT_MAX_SEARCH_RESULTS
        return {
            "query": query,
            "matches": matches[:limit],
            "total_matches": len(matches),
            "truncated": len(matches) > limit,
        }

    @staticmethod
    def get_current_time() -> Dict[str, Any]:
        now = datetime.now().astimezone()
        offset = now.utcoffset()
        return {
            "local": now.isoformat(),
            "utc": now.astimezone(timezone.utc).isoformat(),
            "timezone_offset_minutes": int(offset.total_seconds() // 60) if offset else 0,
        }


def create_workspace_tools(workspace_root: Union[str, Path, None] = None) -> List[FunctionTool]:
    """Return the workspace tools as Agents SDK ``FunctionTool`` objects."""
    tools = WorkspaceTools(workspace_root)

    def read_file(
        path: str,
        start_line: Optional[int] = None,
        end_line: Optional[int] = None,
        max_chars: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Read a UTF-8 text file from the workspace with an optional line range.

        Args:
            path: File path relative to the workspace root.
            start_line: First line to return (1-based).
            end_line: Last line to return (inclusive).
            max_chars: Maximum characters of numbered content to return.
        """
        return tools.read_file(path, start_line, end_line, max_chars)

    def list_files(path: Optional[str] = None, max_results: Optional[int] = None) -> Dict[str, Any]:
        """List files under a workspace path.

        Args:
            path: Directory relative to the workspace root.
            max_results: Maximum number of files to return.
        """
        return tools.list_files(path or ".", max_results)

    def search_files(query: str, path: Optional[str] = None, max_results: Optional[int] = None) -> Dict[str, Any]:
        """Search text in workspace files.

        Args:
            query: Text to look for; case-insensitive unless it contains capitals.
            path: Directory or file relative to the workspace root.
            max_results: Maximum number of matching lines to return.
        """
        return tools.search_files(query, path or ".", max_results)

    def get_current_time() -> Dict[str, Any]:
        """Get the current local and UTC timestamps."""
        return tools.get_current_time()

    return [function_tool(fn) for fn in (read_file, list_files, search_files, get_current_time)]


__all__ = ["WorkspaceTools", "create_workspace_tools"]
