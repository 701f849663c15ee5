"""Digest output rendering."""

from src.renderer.io import AtomicWriter
from src.renderer.json_renderer import JsonRenderer, render_digest_json
from src.renderer.models import GeneratedFile


__all__ = [
    "AtomicWriter",
    "GeneratedFile",
    "JsonRenderer",
    "render_digest_json",
]
