"""Wall-clock instrumentation for pipeline stages."""

from __future__ import annotations

import csv
import logging
import time
from pathlib import Path

from enrich_articles.models import StopwatchRecord

logger = logging.getLogger(__name__)


class Stopwatch:
    """Starts on construction; reports elapsed whole milliseconds."""

    def __init__(self) -> None:
        self._started = time.perf_counter()

    def elapsed_ms(self) -> int:
        return int((time.perf_counter() - self._started) * 1000)


class TimingRecorder:
    """Collects one StopwatchRecord per attempted unit of work and writes them out once."""

    def __init__(self, output_path: Path | str) -> None:
        self.output_path = Path(output_path).expanduser()
        self.records: list[StopwatchRecord] = []

    def record(self, task_name: str, elapsed_ms: int) -> None:
        self.records.append(StopwatchRecord(task_name=task_name, elapsed_milliseconds=elapsed_ms))
        logger.debug("%s took %d ms", task_name, elapsed_ms)

    def flush(self) -> Path:
        """
        Write all records as `taskName,elapsedMilliseconds` lines, replacing the file.

        Names containing a comma, quote or line break are quoted so every line
        still parses as two CSV fields.
        """
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        with self.output_path.open("w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f, lineterminator="\n")
            for record in self.records:
                writer.writerow([record.task_name, record.elapsed_milliseconds])
        logger.info("Saved %d stopwatch records to %s", len(self.records), self.output_path)
        return self.output_path
