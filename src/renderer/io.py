"""Atomic file writing for rendered output."""

import hashlib
from pathlib import Path

import structlog

from src.renderer.models import GeneratedFile


logger = structlog.get_logger()


class AtomicWriter:
    """Writes files through a temporary sibling and a rename.

    Readers see either the previous file or the complete new one.
    """

    def __init__(self, run_id: str | None = None) -> None:
        self._log = logger.bind(component="atomic_writer")
        if run_id:
            self._log = self._log.bind(run_id=run_id)

    def write(self, path: Path, content: str) -> GeneratedFile:
        """Write UTF-8 content to ``path`` atomically.

        Missing parent directories are created.

        Args:
            path: Target file path.
            content: Text to write.

        Returns:
            GeneratedFile with size and checksum.
        """
        content_bytes = content.encode("utf-8")
        sha256 = hashlib.sha256(content_bytes).hexdigest()

        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        temp_path.write_bytes(content_bytes)
        temp_path.replace(path)

        self._log.debug(
            "file_written",
            path=str(path),
            bytes=len(content_bytes),
            sha256=sha256[:12],
        )

        return GeneratedFile(
            path=str(path),
            bytes_written=len(content_bytes),
            sha256=sha256,
        )
