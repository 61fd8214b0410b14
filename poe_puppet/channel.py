"""Conversation channel: one message round-trip.

There is no request id to correlate against. The only evidence that the
site accepted a message is the busy indicator appearing, and the only
evidence that the reply is finished is that indicator going away again.
Both waits time out independently and raise distinct errors.
"""

from __future__ import annotations

import logging
import time
from typing import List

from poe_puppet.config import PuppetConfig
from poe_puppet.errors import (
    IndicatorAppearTimeoutError,
    IndicatorDisappearTimeoutError,
    InputNotFoundError,
    SubmitControlNotFoundError,
    WaitTimeoutError,
)
from poe_puppet.models import ChannelState, SendResult
from poe_puppet.selectors import DEFAULT_SELECTORS, ChatSelectors
from poe_puppet.transcript import TranscriptReader

LOG = logging.getLogger(__name__)


class ConversationChannel:
    def __init__(
        self,
        transport,
        config: PuppetConfig,
        transcript: TranscriptReader,
        selectors: ChatSelectors = DEFAULT_SELECTORS,
    ) -> None:
        self.transport = transport
        self.config = config
        self.transcript = transcript
        self.selectors = selectors
        self.state = ChannelState.IDLE
        self.history: List[ChannelState] = [ChannelState.IDLE]

    def _enter(self, state: ChannelState) -> None:
        self.state = state
        self.history.append(state)
        LOG.debug("Channel state -> %s", state.value)

    def send(self, message: str) -> SendResult:
        """Submit ``message`` and return the reply once the site goes idle."""
        if not message or not message.strip():
            raise ValueError("Cannot send an empty message")

        self.state = ChannelState.IDLE
        self.history = [ChannelState.IDLE]
        started = time.monotonic()
        LOG.debug("Sending message: %s", message)
        try:
            self._compose(message)
            self._submit()
            self._await_processing()
            self._await_idle()
            self._enter(ChannelState.COMPLETE)
        except Exception:
            self._enter(ChannelState.FAILED)
            raise

        last = self.transcript.read_last(1)
        text = last[-1] if last else ""
        return SendResult(text=text, states=list(self.history), elapsed=time.monotonic() - started)

    def _compose(self, message: str) -> None:
        selector = self.selectors.input_field
        field = self.transport.query_selector(selector)
        if field is None:
            raise InputNotFoundError("No textarea found.", operation="send", selector=selector)
        self._enter(ChannelState.COMPOSING)
        self.transport.dispatch_type(field, message, self.config.writing_speed)

    def _submit(self) -> None:
        selector = self.selectors.submit_control
        button = self.transport.query_selector(selector)
        if button is None:
            raise SubmitControlNotFoundError("Could not find send button", operation="send", selector=selector)
        self.transport.dispatch_click(button)
        self._enter(ChannelState.SUBMITTED)

    def _await_processing(self) -> None:
        # the indicator takes a moment to render after the click; wait_for polls
        LOG.debug("Waiting for stop button to appear and disappear to know when the bot is done.")
        try:
            self.transport.wait_for(
                self.selectors.busy_indicator,
                visible=True,
                timeout=self.config.timeout_ms(self.config.indicator_timeout),
            )
        except WaitTimeoutError as exc:
            raise IndicatorAppearTimeoutError(
                "Busy indicator never appeared; the message may not have been accepted",
                operation="send",
                selector=self.selectors.busy_indicator,
            ) from exc
        LOG.debug("Found stop button.")
        self._enter(ChannelState.PROCESSING)

    def _await_idle(self) -> None:
        self._wait_hidden()
        LOG.debug("Stop button disappeared.")

        # minimum dwell: the indicator can blink off between streamed chunks
        for _ in range(self.config.max_idle_rechecks):
            if self.config.settle_ms <= 0:
                break
            self.transport.pause(self.config.settle_ms)
            indicator = self.transport.query_selector(self.selectors.busy_indicator)
            if indicator is None or not self.transport.is_visible(indicator):
                break
            LOG.debug("Stop button came back, waiting again.")
            self._wait_hidden()

    def _wait_hidden(self) -> None:
        try:
            self.transport.wait_for(
                self.selectors.busy_indicator,
                visible=False,
                timeout=self.config.timeout_ms(self.config.response_timeout),
            )
        except WaitTimeoutError as exc:
            raise IndicatorDisappearTimeoutError(
                "Reply did not finish before the response timeout",
                operation="send",
                selector=self.selectors.busy_indicator,
            ) from exc
