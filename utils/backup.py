import json
from datetime import date
from typing import Any, Dict, Iterable, Optional, Union

from pydantic import ValidationError

from models.backup import ExportData


class BackupFormatError(ValueError):
    pass


def backup_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"be-spelling-backup-{today.isoformat()}.json"


def dump_backup(data: Dict[str, Any]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def _first_duplicate(values: Iterable[str]) -> Optional[str]:
    seen = set()
    for value in values:
        if value in seen:
            return value
        seen.add(value)
    return None


def parse_backup(raw: Union[str, bytes, Dict[str, Any]]) -> Dict[str, Any]:
    """Validate an exported snapshot (ours or the browser build's camelCase one)."""
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise BackupFormatError("Import file is not UTF-8 text") from exc
    if isinstance(raw, str):
        if not raw.strip():
            raise BackupFormatError("Import data is empty")
        try:
            raw = json.loads(raw)
        except ValueError as exc:
            raise BackupFormatError(f"Invalid JSON: {exc}") from exc
    if not isinstance(raw, dict) or not isinstance(raw.get("words"), list):
        raise BackupFormatError("Invalid data format")
    try:
        snapshot = ExportData.model_validate(raw)
    except ValidationError as exc:
        raise BackupFormatError(f"Invalid data format: {exc.error_count()} invalid field(s)") from exc

    duplicate = _first_duplicate(word.id for word in snapshot.words)
    if duplicate is not None:
        raise BackupFormatError(f"Duplicate word id: {duplicate}")
    duplicate = _first_duplicate(srs.word_id for srs in snapshot.srs)
    if duplicate is not None:
        raise BackupFormatError(f"Duplicate schedule for word id: {duplicate}")
    return snapshot.model_dump(mode="json")
