"""Common CLI helper utilities."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any


def setup_logging(level: str = "INFO") -> None:
    """Configure standard logging format for CLI tools."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def save_jsonl_local(
    records: list[dict[str, Any]],
    prefix: str,
    timestamp: datetime,
    output_dir: str = "output",
) -> Path:
    """Save records to a local JSONL file.

    Args:
        records: List of dictionaries to save.
        prefix: Filename prefix (e.g., "enriched_articles").
        timestamp: Timestamp to include in filename.
        output_dir: Directory to save to (default: "output").

    Returns:
        Path to the created file.
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    filename = f"{prefix}_{timestamp.strftime('%Y_%m_%d_%H_%M')}.jsonl"
    filepath = output_path / filename
    with filepath.open("w", encoding="utf-8") as f:
        for record in records:
            f.write(json.dumps(record, default=str, ensure_ascii=False) + "\n")
    return filepath
