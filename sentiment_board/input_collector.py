"""Editable list of (text, source) entries awaiting analysis."""
import logging
from typing import List, Optional

from sentiment_board.models import Entry, AnalysisRequestItem

logger = logging.getLogger(__name__)

FILE_UPLOAD_SOURCE = "File Upload"

SAMPLE_ENTRIES = [
    ("The new phone has an incredible camera and the battery life is amazing. Best purchase this year!", "Product Review"),
    ("I'm very disappointed with the customer service. I was on hold for over an hour and my issue is still not resolved.", "Support Ticket"),
    ("The package arrived today, three days earlier than expected. Everything was in order.", "Shipping Feedback"),
    ("The user interface is a bit confusing to navigate. It took me a while to find the settings menu.", "User Survey"),
]


def split_lines(content: str) -> List[str]:
    """Return the non-blank lines of `content`, stripped of line endings."""
    return [line.rstrip("\r") for line in (content or "").split("\n") if line.strip()]


def decode_upload(data: bytes) -> str:
    """Decode uploaded file bytes as UTF-8, tolerating a BOM and bad bytes."""
    return data.decode("utf-8-sig", errors="replace")


class InputCollector:
    """
    Ordered, editable list of entries.

    The list is never empty: removing the last entry is refused and resets
    leave a single blank entry behind.
    """

    def __init__(self, entries: Optional[List[Entry]] = None):
        self._entries: List[Entry] = list(entries) if entries else [Entry()]

    @property
    def entries(self) -> List[Entry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def _index(self, entry_id: str) -> int:
        for i, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return i
        return -1

    def get(self, entry_id: str) -> Optional[Entry]:
        i = self._index(entry_id)
        return self._entries[i] if i != -1 else None

    def add_entry(self, text: str = "", source: Optional[str] = None) -> Entry:
        """Append an entry; the source defaults to the last entry's source."""
        if source is None:
            source = self._entries[-1].source if self._entries else ""
        entry = Entry(text=text, source=source)
        self._entries.append(entry)
        return entry

    def update_entry(self, entry_id: str, text: Optional[str] = None, source: Optional[str] = None) -> bool:
        entry = self.get(entry_id)
        if entry is None:
            return False
        if text is not None:
            entry.text = text
        if source is not None:
            entry.source = source
        return True

    def remove_entry(self, entry_id: str) -> bool:
        if len(self._entries) <= 1:
            return False
        i = self._index(entry_id)
        if i == -1:
            return False
        del self._entries[i]
        return True

    def paste_expand(self, entry_id: str, pasted: str) -> bool:
        """
        Split a multi-line paste into one entry per non-blank line.

        The target entry is replaced in place and every new entry inherits its
        source. Returns False (paste not intercepted) for single-line content
        or an unknown entry.
        """
        lines = split_lines(pasted)
        if len(lines) <= 1:
            return False
        i = self._index(entry_id)
        if i == -1:
            return False

        source = self._entries[i].source
        self._entries[i:i + 1] = [Entry(text=line, source=source) for line in lines]
        logger.debug("Expanded paste into %d entries at position %d", len(lines), i)
        return True

    def load_from_file(self, content: str, source: Optional[str] = None) -> int:
        """
        Replace all entries with the non-blank lines of a file.

        Content without any non-blank line leaves the list unchanged.

        Returns:
            Number of entries loaded
        """
        source = source or FILE_UPLOAD_SOURCE
        lines = split_lines(content)
        if not lines:
            logger.info("Ignoring upload %r: no non-blank lines", source)
            return 0
        self._entries = [Entry(text=line, source=source) for line in lines]
        logger.info("Loaded %d entries from %r", len(lines), source)
        return len(lines)

    def load_samples(self) -> None:
        self._entries = [Entry(text=text, source=source) for text, source in SAMPLE_ENTRIES]

    def reset(self) -> None:
        self._entries = [Entry()]

    def has_content(self) -> bool:
        return any(not entry.is_blank for entry in self._entries)

    def valid_submission_set(self) -> List[AnalysisRequestItem]:
        return [entry.to_item() for entry in self._entries if not entry.is_blank]
