from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Optional

from jsonschema import Draft202012Validator

from refhelper.loader import DATASET_DIR_SUFFIX, DATASET_FILE_SUFFIX
from refhelper.logic import IDENTITY_FIELDS
from refhelper.utils.types import FileValidation, ValidationReport

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("category", "example", "purpose", "docs", "tips")
RECORD_SCHEMA = "command_record.schema.json"


def load_record_schema(schema_path: Optional[Path] = None) -> Dict[str, Any]:
    if schema_path is None:
        raw = resources.files("refhelper.schema").joinpath(RECORD_SCHEMA).read_text(encoding="utf-8")
    else:
        if not schema_path.exists():
            raise FileNotFoundError(f"Record schema not found: {schema_path}")
        raw = schema_path.read_text(encoding="utf-8")
    return json.loads(raw)


def _schema_errors(validator: Draft202012Validator, item: Dict[str, Any], skip: List[str]) -> List[str]:
    errors: List[str] = []
    for error in sorted(validator.iter_errors(item), key=lambda entry: list(entry.path)):
        if error.path and error.path[0] in skip:
            continue
        field = ".".join(str(part) for part in error.path) or "<root>"
        errors.append(f"{field}: {error.message}")
    return errors


def discover_dataset_files(data_root: Path) -> List[Path]:
    files: List[Path] = []
    if not data_root.is_dir():
        return files
    for dataset_dir in sorted(data_root.iterdir()):
        if not dataset_dir.is_dir() or not dataset_dir.name.endswith(DATASET_DIR_SUFFIX):
            continue
        files.extend(sorted(dataset_dir.glob(f"*{DATASET_FILE_SUFFIX}")))
    return files


def validate_records(data: Any, label: str, schema: Optional[Dict[str, Any]] = None) -> List[str]:
    if not isinstance(data, list):
        return [f"[{label}] Root must be an array."]

    validator = Draft202012Validator(schema if schema is not None else load_record_schema())
    errors: List[str] = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            errors.append(f"[{label} index {index}] Record must be an object.")
            continue

        identifier = next((item[name] for name in IDENTITY_FIELDS if item.get(name)), None)
        if not identifier:
            errors.append(f"[{label} index {index}] Missing 'element', 'command', or 'property'.")

        missing = [field for field in REQUIRED_FIELDS if not item.get(field)]
        for field in missing:
            errors.append(f'[{label} item "{identifier}"] Missing field: {field}')
        for message in _schema_errors(validator, item, skip=missing):
            errors.append(f'[{label} item "{identifier}"] {message}')
    return errors


def validate_dataset_file(path: Path, schema: Optional[Dict[str, Any]] = None) -> FileValidation:
    result = FileValidation(path=str(path))
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        result.errors.append(f"[{path.name}] Failed to parse JSON: {exc}")
        return result

    result.errors.extend(validate_records(data, path.name, schema=schema))
    return result


def validate_data_root(data_root: Path) -> ValidationReport:
    """Check every ``*-commands.json`` under ``*-reference-helper`` dirs of ``data_root``.

    Violations are accumulated across all files rather than stopping at the
    first one.
    """

    report = ValidationReport(data_root=str(data_root))
    if not data_root.is_dir():
        report.files.append(
            FileValidation(path=str(data_root), errors=[f"[{data_root}] Data root not found."])
        )
        return report

    schema = load_record_schema()
    for path in discover_dataset_files(data_root):
        validation = validate_dataset_file(path, schema=schema)
        logger.debug("Validated %s: %d error(s)", path, len(validation.errors))
        report.files.append(validation)
    return report
