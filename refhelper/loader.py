from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

from refhelper.utils.config import DEFAULT_CONFIG
from refhelper.utils.types import CommandRecord, LoadResult

logger = logging.getLogger(__name__)

DATASET_DIR_SUFFIX = "-reference-helper"
DATASET_FILE_SUFFIX = "-commands.json"


class DataLoadError(RuntimeError):
    """Raised when a dataset cannot be fetched, parsed or has the wrong shape."""


def dataset_relpath(language: str) -> str:
    return f"{language}{DATASET_DIR_SUFFIX}/{language}{DATASET_FILE_SUFFIX}"


def load_error_status(language: str) -> str:
    return f"Error loading data for {language}. Please check your connection or try again later."


def is_remote_source(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def discover_languages(root: Path) -> List[str]:
    if not root.is_dir():
        return []
    languages: List[str] = []
    for candidate in sorted(root.iterdir()):
        if candidate.is_dir() and candidate.name.endswith(DATASET_DIR_SUFFIX):
            languages.append(candidate.name[: -len(DATASET_DIR_SUFFIX)])
    return languages


def _fetch_remote(
    url: str,
    http_settings: Dict[str, Any],
    transport: Optional[httpx.BaseTransport] = None,
) -> Any:
    headers = {
        "User-Agent": str(http_settings.get("user_agent", DEFAULT_CONFIG["http"]["user_agent"])),
        "Accept": "application/json",
    }
    timeout = float(http_settings.get("timeout_seconds", DEFAULT_CONFIG["http"]["timeout_seconds"]))
    try:
        with httpx.Client(
            timeout=httpx.Timeout(timeout),
            headers=headers,
            follow_redirects=True,
            transport=transport,
        ) as client:
            resp = client.get(url)
    except httpx.HTTPError as exc:
        raise DataLoadError(f"Request to {url} failed: {exc}") from exc

    if resp.is_error:
        raise DataLoadError(f"HTTP error! status: {resp.status_code}")
    try:
        return resp.json()
    except ValueError as exc:
        raise DataLoadError(f"Invalid JSON from {url}: {exc}") from exc


def _read_local(path: Path) -> Any:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DataLoadError(f"Cannot read {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise DataLoadError(f"{path} is not valid UTF-8: {exc}") from exc
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise DataLoadError(f"Invalid JSON in {path}: {exc}") from exc


def fetch_commands(
    language: str,
    source: str,
    http_settings: Optional[Dict[str, Any]] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> List[CommandRecord]:
    """Fetch and shape-check one dataset, raising ``DataLoadError`` on failure."""

    relpath = dataset_relpath(language)
    if is_remote_source(source):
        data = _fetch_remote(f"{source.rstrip('/')}/{relpath}", http_settings or {}, transport)
    else:
        data = _read_local(Path(source) / relpath)

    if not isinstance(data, list):
        raise DataLoadError("Invalid data format: Expected an array.")
    return data


def load_commands(
    language: str,
    source: str,
    http_settings: Optional[Dict[str, Any]] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> LoadResult:
    try:
        commands = fetch_commands(language, source, http_settings=http_settings, transport=transport)
    except DataLoadError as exc:
        logger.error("Failed to load %s from %s: %s", dataset_relpath(language), source, exc)
        return LoadResult(
            language=language,
            source=source,
            commands=[],
            status=load_error_status(language),
            ok=False,
        )

    logger.debug("Loaded %d records for %s from %s", len(commands), language, source)
    return LoadResult(language=language, source=source, commands=commands, status="", ok=True)
