"""Per-run markdown log file.

Every record logged while the run log is open (ours and third-party
libraries' alike) is appended to ``<log_dir>/YYYY-MM-DD_HH-MM-SS.md``, one
line per record, with bare URLs turned into ``<url>`` autolinks.
"""

import logging
import re
from datetime import datetime
from pathlib import Path

_URL_RE = re.compile(r"(?<![<(\"'])(https?://[^\s<>\"')]+)")
_TRAILING_PUNCT = ".,;:!?"


def _link(match: re.Match) -> str:
    url = match.group(1)
    stripped = url.rstrip(_TRAILING_PUNCT)
    return f"<{stripped}>{url[len(stripped):]}"


def autolink(text: str) -> str:
    """Wrap bare http(s) URLs in markdown autolink brackets."""
    return _URL_RE.sub(_link, text)


class RunLogFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__(
            fmt="`%(asctime)s` %(levelname)s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        # Trailing two spaces: markdown line break
        return autolink(super().format(record)) + "  "


class RunLog(logging.FileHandler):
    """File handler scoped to one run. Use as a context manager.

    Attached to the root logger, so records from third-party libraries
    (trafilatura, the LLM SDKs) land in the run log too.
    """

    def __init__(
        self,
        log_dir: Path,
        started_at: datetime | None = None,
        logger_name: str = "cineanime",
    ) -> None:
        self.started_at = started_at or datetime.now()
        self.path = Path(log_dir) / f"{self.started_at:%Y-%m-%d_%H-%M-%S}.md"
        self.path.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(self.path, mode="a", encoding="utf-8")
        self.setFormatter(RunLogFormatter())
        self._logger = logging.getLogger(logger_name)

    def append(self, message: str, *args) -> None:
        self._logger.info(message, *args)

    def __enter__(self) -> "RunLog":
        logging.getLogger().addHandler(self)
        self.stream.write(f"# Run {self.started_at:%Y-%m-%d %H:%M:%S}\n\n")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc is not None:
            self._logger.error("Run aborted: %r", exc)
        logging.getLogger().removeHandler(self)
        self.close()
