"""
preview.py

Single-slot preview state machine. The Preview value is immutable; drawing it
is delegated to a renderer so the state machine runs without any UI.

    IDLE --show--> SHOWING --accept/discard--> IDLE
    SHOWING --show--> SHOWING   (old preview torn down first)
"""

import enum
import logging
from dataclasses import dataclass, field, replace

from .errors import StaleAnchor

logger = logging.getLogger(__name__)


class PreviewState(enum.Enum):
    IDLE = "idle"
    SHOWING = "showing"


@dataclass(frozen=True)
class Anchor:
    """Insertion point plus the document revision it was taken at."""

    position: int
    revision: int

    @classmethod
    def at_cursor(cls, document, position=None):
        if position is None:
            position = document.cursor
        return cls(position=position, revision=document.revision)

    def check(self, document):
        """Raise StaleAnchor unless the document is unchanged since the anchor was taken."""
        if document.revision != self.revision:
            raise StaleAnchor(
                f"document revision moved from {self.revision} to {document.revision}"
            )
        if not 0 <= self.position <= len(document.text):
            raise StaleAnchor(f"anchor {self.position} outside document of length {len(document.text)}")


@dataclass(frozen=True)
class Preview:
    """A suggestion shown at `anchor`. `active` goes False once it is accepted or discarded."""

    anchor: Anchor
    text: str
    active: bool = field(default=True, compare=False)


class PreviewRenderer:
    """Maps a Preview to the host's visuals. The base class draws nothing."""

    def render(self, preview):
        pass

    def clear(self):
        pass


class PreviewController:
    """
    Owns the one active Preview of an editing session.

    :param document: The buffer accepted text is inserted into.
    :param renderer: A PreviewRenderer; defaults to one that draws nothing.
    """

    def __init__(self, document, renderer=None):
        self.document = document
        self.renderer = renderer or PreviewRenderer()
        self._preview = None
        self._retired = None

    @property
    def preview(self):
        return self._preview

    @property
    def retired(self):
        """The last preview that was torn down, marked inactive."""
        return self._retired

    @property
    def state(self):
        return PreviewState.SHOWING if self._preview is not None else PreviewState.IDLE

    def show(self, anchor, text):
        if self._preview is not None:
            self._teardown()
        self._preview = Preview(anchor=anchor, text=text)
        self.renderer.render(self._preview)
        logger.debug("Showing preview of %d chars at %d", len(text), anchor.position)
        return self._preview

    def accept(self):
        """
        Insert the preview text at its anchor and go idle.

        Returns True if text was inserted. A stale anchor discards the preview
        instead of inserting somewhere unrelated.
        """
        preview = self._preview
        if preview is None:
            return False

        try:
            preview.anchor.check(self.document)
        except StaleAnchor as e:
            logger.warning("Discarding completion, buffer changed under the preview: %s", e)
            self._teardown()
            return False

        # Tear down first so the insertion is never drawn over by the overlay
        self._teardown()
        self.document.insert(preview.anchor.position, preview.text)
        logger.info("Accepted completion of %d chars at %d", len(preview.text), preview.anchor.position)
        return True

    def discard(self):
        if self._preview is None:
            return False
        self._teardown()
        logger.debug("Discarded preview")
        return True

    def _teardown(self):
        self._retired = replace(self._preview, active=False)
        self._preview = None
        self.renderer.clear()
