"""Host boundary: flow items, relationships and process sessions.

The processor pulls items from a session and pushes each one, with its new
attributes, to a relationship. Any host that can implement ``ProcessSession``
can drive the processor.
"""
import itertools
import logging
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from threading import Lock
from typing import Deque, Dict, Iterable, List, Optional, Tuple

from core.exceptions import DecodeError
from database.training_set import is_training_image

logger = logging.getLogger(__name__)

_item_ids = itertools.count(1)


@dataclass(frozen=True)
class Relationship:
    """Named outgoing route of a processor."""
    name: str
    description: str = ""


REL_SUCCESS = Relationship("success", "Frames whose face has been recognised.")
REL_FAILURE = Relationship("failure", "Frames that could not be decoded or recognised.")


@dataclass
class FlowItem:
    """One unit of work: encoded image bytes plus string attributes.

    ``content`` stays empty for items whose session reads them lazily.
    """
    content: bytes = b""
    attributes: Dict[str, str] = field(default_factory=dict)
    id: int = field(default_factory=lambda: next(_item_ids))


class ProcessSession(ABC):
    """Pull-based item source and push-based completion sink."""

    @abstractmethod
    def get(self) -> Optional[FlowItem]:
        """Take the next item, or None when nothing is queued."""
        pass

    @abstractmethod
    def transfer(self, item: FlowItem, relationship: Relationship) -> None:
        """Complete an item by routing it to a relationship."""
        pass

    def read(self, item: FlowItem) -> bytes:
        """Read the content of an item."""
        return item.content

    def put_attribute(self, item: FlowItem, key: str, value: str) -> None:
        item.attributes[key] = value


class InMemorySession(ProcessSession):
    """Thread-safe in-memory session.

    Queued items are handed out once; transferred items are recorded per
    relationship name.
    """

    def __init__(self, items: Iterable[FlowItem] = ()) -> None:
        self._queue: Deque[FlowItem] = deque(items)
        self._transferred: Dict[str, List[FlowItem]] = {}
        self._lock = Lock()

    def enqueue(self, item: FlowItem) -> None:
        with self._lock:
            self._queue.append(item)

    def get(self) -> Optional[FlowItem]:
        with self._lock:
            if not self._queue:
                return None
            return self._queue.popleft()

    def transfer(self, item: FlowItem, relationship: Relationship) -> None:
        with self._lock:
            self._transferred.setdefault(relationship.name, []).append(item)

    def transferred(self, relationship: Relationship) -> List[FlowItem]:
        """Items routed to a relationship, in transfer order."""
        with self._lock:
            return list(self._transferred.get(relationship.name, []))

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._queue)


class DirectorySession(InMemorySession):
    """Session whose items are the image files of a directory.

    Each item carries ``filename`` and ``path`` attributes. File contents are
    read when the item is processed, so only one frame is held at a time.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        if not self.directory.is_dir():
            raise FileNotFoundError(f"Input directory not found: {self.directory}")

        items = [
            FlowItem(attributes={"filename": path.name, "path": str(path)})
            for path in sorted(self.directory.iterdir())
            if path.is_file() and is_training_image(path.name)
        ]
        super().__init__(items)
        logger.info(f"Queued {len(items)} images from {self.directory}")

    def read(self, item: FlowItem) -> bytes:
        """Read an item's file.

        Raises:
            DecodeError: If the file can no longer be read.
        """
        if item.content:
            return item.content
        path = Path(item.attributes["path"])
        try:
            return path.read_bytes()
        except OSError as e:
            raise DecodeError(f"Cannot read {path}: {e}") from e

    def results(self) -> List[Tuple[FlowItem, Relationship]]:
        """All completed items with their relationship, in item order."""
        done = [
            (item, rel)
            for rel in (REL_SUCCESS, REL_FAILURE)
            for item in self.transferred(rel)
        ]
        return sorted(done, key=lambda pair: pair[0].id)
