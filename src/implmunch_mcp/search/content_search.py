"""Recursive content search producing grep-formatted output.

Output lines look like "path:12:text" for matching lines and "path-13-text"
for context lines, with "--" between non-adjacent groups. Both searchers
produce the same format so the extractor does not care which one ran.
"""

import logging
import re
import shutil
import subprocess
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from ..config import EngineConfig
from ..errors import SearchError, SearchTimeout

logger = logging.getLogger(__name__)


# Directories never searched (build output and vendored trees)
SKIP_DIRS = ["target", ".git", "node_modules", ".hg", ".svn", ".idea", ".vscode"]


@dataclass
class SearchRequest:
    """Arguments for one recursive content search."""
    pattern: str                    # Extended regex, valid for grep -E and Python re
    directory: str                  # Scope directory
    extension: str = ".rs"          # Only files with this suffix
    after_context: int = 1000       # Lines of trailing context per match
    before_context: int = 0         # Lines of leading context per match


class ContentSearcher(Protocol):
    """Collaborator that runs a recursive content search.

    Returns raw grep-formatted text; an empty string means no matches.
    Raises SearchTimeout when the time budget is exceeded and SearchError
    when the search cannot run at all.
    """

    def search(self, request: SearchRequest) -> str:
        ...


def _trim_to_line(data: bytes, limit: int) -> bytes:
    """Cut data to at most limit bytes, ending on a complete line."""
    data = data[:limit]
    newline = data.rfind(b"\n")
    return data[:newline + 1] if newline >= 0 else b""


class GrepSearcher:
    """Runs grep in a subprocess, with a timeout and an output cap."""

    def __init__(
        self,
        executable: str = "grep",
        timeout: float = 10.0,
        max_output_bytes: int = 10 * 1024 * 1024,
    ):
        self.executable = executable
        self.timeout = timeout
        self.max_output_bytes = max_output_bytes

    def build_args(self, request: SearchRequest) -> list[str]:
        """Argument list for the grep invocation (never passed through a shell)."""
        args = [
            self.executable,
            "-r",
            "-n",
            "-E",
            f"--include=*{request.extension}",
        ]
        for skip in SKIP_DIRS:
            args.append(f"--exclude-dir={skip}")
        args += ["-A", str(request.after_context)]
        if request.before_context:
            args += ["-B", str(request.before_context)]
        args += ["-e", request.pattern, "--", request.directory]
        return args

    def search(self, request: SearchRequest) -> str:
        args = self.build_args(request)
        timed_out = threading.Event()

        try:
            proc = subprocess.Popen(args, stdout=subprocess.PIPE, stderr=subprocess.DEVNULL)
        except OSError as e:
            raise SearchError(f"Failed to run {self.executable}: {e}") from e

        def _kill():
            timed_out.set()
            proc.kill()

        timer = threading.Timer(self.timeout, _kill)
        timer.start()
        try:
            output = proc.stdout.read(self.max_output_bytes + 1)
            truncated = len(output) > self.max_output_bytes
            if truncated:
                proc.kill()
            returncode = proc.wait()
        finally:
            timer.cancel()
            proc.stdout.close()

        if timed_out.is_set():
            raise SearchTimeout(f"Search in {request.directory} exceeded {self.timeout}s")

        if truncated:
            logger.warning(
                f"Search output in {request.directory} exceeded {self.max_output_bytes} bytes; truncated"
            )
            output = _trim_to_line(output, self.max_output_bytes)
        elif returncode == 1:
            # grep exits with 1 when nothing matched
            return ""
        elif returncode > 1 and not output:
            raise SearchError(f"{self.executable} exited with status {returncode}")

        return output.decode("utf-8", errors="replace")


def should_skip_path(path: Path, root: Path) -> bool:
    """Check whether a file lies under one of SKIP_DIRS relative to root."""
    try:
        parts = path.relative_to(root).parts
    except ValueError:
        return True
    return any(part in SKIP_DIRS for part in parts[:-1])


def discover_source_files(
    folder_path: Path,
    extension: str = ".rs",
    max_size: int = 2 * 1024 * 1024,
) -> list[Path]:
    """Source files under folder_path, sorted for stable output.

    Args:
        folder_path: Root folder to scan
        extension: File suffix to keep
        max_size: Maximum file size in bytes

    Returns:
        List of Path objects for source files
    """
    files = []

    for file_path in folder_path.rglob(f"*{extension}"):
        if not file_path.is_file():
            continue

        if should_skip_path(file_path, folder_path):
            continue

        try:
            if file_path.stat().st_size > max_size:
                continue
        except OSError:
            continue

        files.append(file_path)

    files.sort()
    return files


def _context_ranges(matches: list[int], before: int, after: int, total: int) -> list[tuple[int, int]]:
    """Merge per-match context windows into disjoint inclusive ranges."""
    ranges = []
    for index in matches:
        start = max(0, index - before)
        end = min(total - 1, index + after)
        if ranges and start <= ranges[-1][1] + 1:
            ranges[-1] = (ranges[-1][0], max(ranges[-1][1], end))
        else:
            ranges.append((start, end))
    return ranges


class PythonSearcher:
    """Pure-Python searcher producing the same output as GrepSearcher."""

    def __init__(self, timeout: float = 10.0, max_output_bytes: int = 10 * 1024 * 1024):
        self.timeout = timeout
        self.max_output_bytes = max_output_bytes

    def search(self, request: SearchRequest) -> str:
        try:
            regex = re.compile(request.pattern)
        except re.error as e:
            raise SearchError(f"Invalid search pattern: {e}") from e

        root = Path(request.directory)
        if not root.is_dir():
            raise SearchError(f"Search directory not found: {request.directory}")

        deadline = time.monotonic() + self.timeout
        out = []
        size = 0

        for file_path in discover_source_files(root, request.extension):
            if time.monotonic() > deadline:
                raise SearchTimeout(f"Search in {request.directory} exceeded {self.timeout}s")

            try:
                lines = file_path.read_text(encoding="utf-8", errors="replace").splitlines()
            except OSError as e:
                logger.debug(f"Skipping unreadable file {file_path}: {e}")
                continue

            matches = [i for i, text in enumerate(lines) if regex.search(text)]
            if not matches:
                continue

            matched = set(matches)
            for start, end in _context_ranges(matches, request.before_context, request.after_context, len(lines)):
                chunk = ["--"] if out else []
                for i in range(start, end + 1):
                    sep = ":" if i in matched else "-"
                    chunk.append(f"{file_path}{sep}{i + 1}{sep}{lines[i]}")

                chunk_size = sum(len(c.encode("utf-8")) + 1 for c in chunk)
                if size + chunk_size > self.max_output_bytes:
                    logger.warning(
                        f"Search output in {request.directory} exceeded {self.max_output_bytes} bytes; truncated"
                    )
                    return "\n".join(out) + ("\n" if out else "")
                out.extend(chunk)
                size += chunk_size

        return "\n".join(out) + ("\n" if out else "")


def default_searcher(config: Optional[EngineConfig] = None) -> ContentSearcher:
    """Pick a searcher: grep when available (or requested), else pure Python."""
    config = config or EngineConfig()

    if config.searcher == "python":
        return PythonSearcher(config.search_timeout, config.max_output_bytes)

    grep = shutil.which("grep")
    if grep:
        return GrepSearcher(grep, config.search_timeout, config.max_output_bytes)

    if config.searcher == "grep":
        logger.warning("grep requested but not found on PATH; using the Python searcher")
    return PythonSearcher(config.search_timeout, config.max_output_bytes)
