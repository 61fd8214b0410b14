"""Agent directory: the bot cards listed on the chat page."""

from __future__ import annotations

import logging
from typing import List

from poe_puppet.config import PuppetConfig
from poe_puppet.errors import AgentNotFoundError
from poe_puppet.models import Agent
from poe_puppet.selectors import DEFAULT_SELECTORS, ChatSelectors

LOG = logging.getLogger(__name__)


class AgentDirectory:
    def __init__(self, transport, config: PuppetConfig, selectors: ChatSelectors = DEFAULT_SELECTORS) -> None:
        self.transport = transport
        self.config = config
        self.selectors = selectors

    def list_agents(self) -> List[Agent]:
        """Return every agent card on the page, in DOM order."""
        LOG.debug("Fetching available chatbots...")
        agents = []
        for card in self.transport.query_selector_all(self.selectors.agent_card):
            name = self.transport.read_text(card, self.selectors.agent_label)
            agents.append(Agent(name=name, handle=card))
        LOG.debug("Found chatbots: %s", [agent.name for agent in agents])
        return agents

    def names(self) -> List[str]:
        return [agent.name for agent in self.list_agents()]

    def select_agent(self, name: str) -> Agent:
        """Click the first card labelled exactly ``name`` and wait for the chat to reload.

        Duplicate labels resolve to the first one in DOM order.
        """
        match = next((agent for agent in self.list_agents() if agent.name == name), None)
        if match is None:
            err = AgentNotFoundError(name, operation="select_agent", selector=self.selectors.agent_card)
            LOG.error("%s", err)
            raise err

        self.transport.click_and_wait_for_navigation(
            match.handle,
            timeout=self.config.timeout_ms(self.config.navigation_timeout),
        )
        LOG.debug("Chatbot changed to: %s", name)
        return match
