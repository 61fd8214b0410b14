"""Transcript reader: message rows currently rendered for the active chat."""

from __future__ import annotations

import logging
from typing import List

from poe_puppet.errors import ClearControlNotFoundError
from poe_puppet.selectors import DEFAULT_SELECTORS, ChatSelectors

LOG = logging.getLogger(__name__)


class TranscriptReader:
    def __init__(self, transport, selectors: ChatSelectors = DEFAULT_SELECTORS) -> None:
        self.transport = transport
        self.selectors = selectors

    def read_all(self) -> List[str]:
        messages = []
        for row in self.transport.query_selector_all(self.selectors.message_row):
            text = self.transport.read_text(row)
            if not text:
                continue
            messages.append(text.strip())
        return messages

    def read_last(self, n: int = 1) -> List[str]:
        """Return the last ``n`` messages in DOM order, or all of them if fewer exist."""
        if n < 0:
            raise ValueError(f"n must not be negative, got {n}")
        LOG.debug("Fetching %s messages.", n)
        if n == 0:
            return []
        messages = self.read_all()
        LOG.debug("Found messages: %s", len(messages))
        return messages[-n:]

    def clear(self) -> None:
        """Click the context reset control. The next read is expected to be empty."""
        button = self.transport.query_selector(self.selectors.clear_control)
        if button is None:
            raise ClearControlNotFoundError(
                "No clear button found.", operation="clear", selector=self.selectors.clear_control
            )
        self.transport.dispatch_click(button)
        LOG.debug("Conversation context cleared")
