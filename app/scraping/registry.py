"""
Extractor registry: maps a record kind to its markup extractor.
"""

from __future__ import annotations

import importlib
from collections.abc import Callable, Mapping
from typing import Any

from app.scraping.parsing import extract_jobs, extract_pricing, extract_products

Extractor = Callable[..., Any]

EXTRACTOR_KINDS = ("pricing", "products", "jobs")


class ExtractorRegistry:
    """
    Extractor registry supporting built-ins and dynamic import paths.

    Every extractor is called as `extractor(markup, url=url)` and returns the
    extracted value, or None / an empty list when nothing was found.
    """

    def __init__(self, registrations: Mapping[str, Extractor | str] | None = None) -> None:
        self._registrations: dict[str, Extractor] = {
            "pricing": extract_pricing,
            "products": extract_products,
            "jobs": extract_jobs,
        }
        for kind, extractor in (registrations or {}).items():
            self.register(kind=kind, extractor=extractor)

    def register(self, *, kind: str, extractor: Extractor | str) -> None:
        normalized = kind.strip().lower()
        if normalized not in EXTRACTOR_KINDS:
            allowed = ", ".join(EXTRACTOR_KINDS)
            raise ValueError(f"Unknown extractor kind='{kind}'. Allowed kinds: {allowed}.")
        if isinstance(extractor, str):
            extractor = self._load_dynamic(extractor)
        self._registrations[normalized] = extractor

    def get(self, kind: str) -> Extractor:
        resolved = self._registrations.get(kind.strip().lower())
        if resolved is None:
            raise ValueError(f"No extractor registered for kind='{kind}'.")
        return resolved

    @staticmethod
    def _load_dynamic(path: str) -> Extractor:
        if ":" not in path:
            raise ValueError(f"Invalid extractor path '{path}'. Use 'module.path:function'.")

        module_path, attribute = path.split(":", 1)
        module = importlib.import_module(module_path)
        loaded = getattr(module, attribute, None)
        if loaded is None:
            raise ValueError(f"Unable to resolve extractor '{path}'.")
        if not callable(loaded):
            raise ValueError(f"Extractor '{path}' must be callable.")
        return loaded
