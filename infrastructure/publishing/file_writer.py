import json
import logging
from pathlib import Path

from domain.models.rates import RateTable

logger = logging.getLogger(__name__)


class RatesFileWriter:
    """Writes a rate table as ``latest.json`` plus a date-stamped copy."""

    def __init__(self, directory: str | Path = "data"):
        self.directory = Path(directory)

    def write(self, table: RateTable) -> list[Path]:
        self.directory.mkdir(parents=True, exist_ok=True)

        content = json.dumps(table.to_payload(), indent=2, ensure_ascii=False)
        paths = [
            self.directory / "latest.json",
            self.directory / f"{table.date.isoformat()}.json",
        ]
        for path in paths:
            path.write_text(content, encoding="utf-8")
            logger.debug(f"Wrote {path}")

        return paths
