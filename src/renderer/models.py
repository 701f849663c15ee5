"""Data models for the renderer module."""

from dataclasses import dataclass


@dataclass
class GeneratedFile:
    """Information about a generated file.

    Attributes:
        path: Path as given to the writer.
        bytes_written: Number of bytes written.
        sha256: SHA-256 checksum of content.
    """

    path: str
    bytes_written: int
    sha256: str
