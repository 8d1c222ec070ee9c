"""Append-only text sink for the audit report."""

from pathlib import Path

from loguru import logger


class ReportSink:
    """
    UTF-8 text file that is only ever appended to.

    Every fleet run adds a new section; earlier sections are never
    rewritten or truncated. Appends are not locked: the fleet processes
    repositories one at a time, so writes arrive in input order.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def append(self, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(text)
        logger.debug("Appended {} chars to {}", len(text), self.path)

    def read(self) -> str:
        if not self.path.exists():
            return ""
        return self.path.read_text(encoding="utf-8")

    def __repr__(self) -> str:
        return f"ReportSink({str(self.path)!r})"
