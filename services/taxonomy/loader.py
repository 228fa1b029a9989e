"""
Taxonomy Loader - Fetch and validate the taxonomy document.
Version: 1.0

Single responsibility: turn a source (mapping, file path or URL) into a
TaxonomyConfig, reporting failures as a value instead of raising.
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import httpx
from pydantic import ValidationError

from services.taxonomy_contracts import TaxonomyConfig, build_fallback_taxonomy

logger = logging.getLogger(__name__)

TaxonomySource = Union[Mapping[str, Any], str, Path, None]


class TaxonomyLoadError(Exception):
    """
    Why a taxonomy source could not be used.

    kind is one of: missing_source, not_found, network, http_status,
    parse, validation.
    """

    def __init__(self, kind: str, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self) -> str:
        return f"TaxonomyLoadError(kind={self.kind!r}, message={self.message!r})"


@dataclass(frozen=True)
class TaxonomyLoadResult:
    """Either a config or an error, never both."""
    config: Optional[TaxonomyConfig] = None
    error: Optional[TaxonomyLoadError] = None
    source: str = ""

    @property
    def ok(self) -> bool:
        return self.config is not None

    def unwrap_or_fallback(self) -> TaxonomyConfig:
        return self.config if self.config is not None else build_fallback_taxonomy()


def describe_source(source: TaxonomySource) -> str:
    if source is None:
        return "none"
    if isinstance(source, Mapping):
        return "inline"
    return str(source)


def is_url(source: Any) -> bool:
    return isinstance(source, str) and source.startswith(("http://", "https://"))


class TaxonomyLoader:
    """
    Loads taxonomy documents.

    Responsibilities:
    - Read injected mappings, local JSON files or remote JSON over HTTP
    - Validate against TaxonomyConfig
    - Report every failure as TaxonomyLoadError inside a result
    """

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None, timeout: float = 5.0):
        self._http_client = http_client
        self.timeout = timeout

    async def load(self, source: TaxonomySource) -> TaxonomyLoadResult:
        """
        Load a taxonomy from source.

        Args:
            source: dict-like document, path to a JSON file, or http(s) URL

        Returns:
            TaxonomyLoadResult with config on success, error otherwise
        """
        label = describe_source(source)

        if source is None or (isinstance(source, str) and not source.strip()):
            return self._failure(label, TaxonomyLoadError("missing_source", "No taxonomy source configured"))

        try:
            if isinstance(source, Mapping):
                document = dict(source)
            elif is_url(source):
                document = await self._fetch_url(source)
            else:
                document = self._read_file(Path(source))
        except TaxonomyLoadError as e:
            return self._failure(label, e)

        return self.parse(document, label)

    def parse(self, document: Any, label: str = "inline") -> TaxonomyLoadResult:
        """Validate an already decoded document."""
        if not isinstance(document, Mapping):
            return self._failure(
                label,
                TaxonomyLoadError("validation", f"Taxonomy must be a JSON object, got {type(document).__name__}")
            )

        try:
            config = TaxonomyConfig.model_validate(document)
        except ValidationError as e:
            return self._failure(
                label,
                TaxonomyLoadError("validation", f"{e.error_count()} validation error(s): {e.errors()[0]['msg']}")
            )

        logger.info(
            f"Taxonomy loaded from {label} "
            f"(v{config.version}, {len(config.structure.types)} types, "
            f"{len(config.function_categories.groups)} function groups)"
        )
        return TaxonomyLoadResult(config=config, source=label)

    async def _fetch_url(self, url: str) -> Any:
        client = self._http_client or httpx.AsyncClient(timeout=self.timeout)
        try:
            response = await client.get(url)
        except httpx.HTTPError as e:
            raise TaxonomyLoadError("network", f"Request to {url} failed: {e}") from e
        finally:
            if self._http_client is None:
                await client.aclose()

        if response.status_code != 200:
            raise TaxonomyLoadError("http_status", f"HTTP error! status: {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise TaxonomyLoadError("parse", f"Invalid JSON from {url}: {e}") from e

    def _read_file(self, path: Path) -> Any:
        if not os.path.exists(path):
            raise TaxonomyLoadError("not_found", f"Taxonomy file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise TaxonomyLoadError("parse", f"Invalid JSON in {path}: {e}") from e
        except OSError as e:
            raise TaxonomyLoadError("not_found", f"Cannot read {path}: {e}") from e

    @staticmethod
    def _failure(label: str, error: TaxonomyLoadError) -> TaxonomyLoadResult:
        logger.warning(f"Failed to load taxonomy from {label}: [{error.kind}] {error.message}")
        return TaxonomyLoadResult(error=error, source=label)
