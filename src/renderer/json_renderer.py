"""JSON rendering of the digest envelope."""

import json
import time
from pathlib import Path

import structlog

from src.digest.models import Digest
from src.renderer.io import AtomicWriter
from src.renderer.models import GeneratedFile


logger = structlog.get_logger()


def render_digest_json(digest: Digest) -> str:
    """Serialize a digest with stable key order and indentation."""
    return json.dumps(
        digest.to_json_dict(),
        sort_keys=True,
        indent=2,
        ensure_ascii=False,
    )


class JsonRenderer:
    """Writes the digest as a JSON document."""

    def __init__(self, run_id: str | None = None) -> None:
        self._writer = AtomicWriter(run_id=run_id)
        self._log = logger.bind(component="renderer", subcomponent="json")
        if run_id:
            self._log = self._log.bind(run_id=run_id)

    def render(self, digest: Digest, output_path: Path) -> GeneratedFile:
        """Render the digest to ``output_path``.

        Args:
            digest: Digest to write.
            output_path: Target JSON file.

        Returns:
            GeneratedFile describing the written file.
        """
        start_time = time.perf_counter()
        file_info = self._writer.write(output_path, render_digest_json(digest))
        duration_ms = (time.perf_counter() - start_time) * 1000

        self._log.info(
            "json_render_complete",
            file_path=file_info.path,
            bytes_written=file_info.bytes_written,
            sha256=file_info.sha256,
            fallback=digest.metadata.fallback,
            duration_ms=round(duration_ms, 2),
        )
        return file_info
