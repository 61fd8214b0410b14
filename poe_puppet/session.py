"""The puppet session: one authenticated browser talking to one chatbot at a time."""

from __future__ import annotations

import logging
from typing import List, Optional

from poe_puppet.auth import AuthenticationGate
from poe_puppet.channel import ConversationChannel
from poe_puppet.config import PuppetConfig
from poe_puppet.directory import AgentDirectory
from poe_puppet.errors import SessionNotReadyError
from poe_puppet.models import Agent, AuthStatus
from poe_puppet.selectors import DEFAULT_SELECTORS, ChatSelectors
from poe_puppet.transcript import TranscriptReader
from poe_puppet.transport import SessionTransport

LOG = logging.getLogger(__name__)


class PoePuppet:
    """Drive the chat site through a single browser page.

    Call :meth:`start` once (or use the instance as a context manager) before
    sending anything. Calls must not overlap; the underlying page only ever
    runs one round-trip at a time.
    """

    def __init__(
        self,
        config: Optional[PuppetConfig] = None,
        *,
        selectors: ChatSelectors = DEFAULT_SELECTORS,
        transport=None,
        gate: Optional[AuthenticationGate] = None,
    ) -> None:
        self.config = config or PuppetConfig()
        self.selectors = selectors
        self.transport = transport or SessionTransport(self.config)
        self.gate = gate or AuthenticationGate(self.transport, self.config, selectors)
        self.directory = AgentDirectory(self.transport, self.config, selectors)
        self.transcript = TranscriptReader(self.transport, selectors)
        self.channel = ConversationChannel(self.transport, self.config, self.transcript, selectors)
        self.active_agent: Optional[str] = None
        self.agents: List[Agent] = []

    @property
    def auth_status(self) -> AuthStatus:
        return self.gate.status

    def start(self) -> PoePuppet:
        """Authenticate, discover the chatbots and select the configured default."""
        self.gate.run()
        self.agents = self.directory.list_agents()
        self.select_agent(self.config.chatbot)
        LOG.info("Ready to interact with %s", self.config.base_url)
        return self

    def _require_page(self, operation: str) -> None:
        if not self.transport.is_running or self.auth_status is not AuthStatus.AUTHENTICATED:
            raise SessionNotReadyError("Session is not authenticated, forgot to start()?", operation=operation)

    def list_agents(self) -> List[Agent]:
        self._require_page("list_agents")
        self.agents = self.directory.list_agents()
        return self.agents

    def select_agent(self, name: str) -> Agent:
        self._require_page("select_agent")
        agent = self.directory.select_agent(name)
        self.active_agent = agent.name
        # the click reloaded the view, so older handles are stale now
        self.agents = self.directory.list_agents()
        return agent

    def send(self, message: str) -> str:
        self._require_page("send")
        if self.active_agent is None:
            raise SessionNotReadyError("No chatbot selected", operation="send")
        return self.channel.send(message).text

    def read_last(self, n: int = 1) -> List[str]:
        self._require_page("read_last")
        return self.transcript.read_last(n)

    def clear_context(self) -> None:
        self._require_page("clear_context")
        self.transcript.clear()

    def close(self) -> None:
        self.transport.shutdown()
        self.active_agent = None
        self.agents = []

    def __enter__(self) -> PoePuppet:
        try:
            return self.start()
        except BaseException:
            if self.transport.is_running:
                self.transport.shutdown()
            raise

    def __exit__(self, *exc_info) -> None:
        if self.transport.is_running:
            self.close()
