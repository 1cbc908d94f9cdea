import logging
from pathlib import Path

try:
    import readline
except ModuleNotFoundError:
    readline = None  # no line-editing recall on this platform

from modem_term import _exceptions

log = logging.getLogger("modem_term.history")


class HistoryStore:
    """Ordered log of submitted lines, one per line in a flat file.

    Entries keep their carriage-return terminator; the file is read and
    written without newline translation so they survive the round trip.
    """

    def __init__(self, path: str | Path, max_entries: int = 1000):
        self._path = Path(path).expanduser()
        self._max_entries = max_entries
        self._entries: list[str] = []

    def __repr__(self) -> str:
        return f"HistoryStore({str(self._path)!r})"

    @property
    def path(self) -> Path:
        return self._path

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    def load(self) -> None:
        try:
            with self._path.open(
                "rt", encoding="utf-8", errors="surrogateescape", newline=""
            ) as file:
                text = file.read()
        except FileNotFoundError:
            log.debug("No history at %s", self._path)
            return
        except OSError as ex:
            message = "Can't read history"
            raise _exceptions.HistoryException(message, str(self._path)) from ex

        loaded = [line for line in text.split("\n") if line]
        self._entries = loaded + self._entries
        log.debug("Loaded %d history entries from %s", len(loaded), self._path)

    def append(self, entry: str) -> None:
        self._entries.append(entry)

    def search(self, text: str) -> list[str]:
        """Entries containing 'text', most recent first"""

        return [e for e in reversed(self._entries) if text in e]

    def save(self) -> None:
        kept = self._entries[-self._max_entries :] if self._max_entries else []
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open(
                "wt", encoding="utf-8", errors="surrogateescape", newline=""
            ) as file:
                file.writelines(f"{e}\n" for e in kept)
        except OSError as ex:
            message = "Can't save history"
            raise _exceptions.HistoryException(message, str(self._path)) from ex

        log.debug("Saved %d history entries to %s", len(kept), self._path)

    def install_recall(self) -> None:
        """Seeds the readline buffer so input() can recall past entries"""

        if readline is None:
            log.debug("No readline, history recall unavailable")
            return

        readline.clear_history()
        for entry in self._entries:
            readline.add_history(entry.rstrip("\r"))
