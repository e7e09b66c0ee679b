"""Chat-completion proxy using the OpenAI API."""

import logging
from openai import OpenAI
from typing import List, Dict, Optional

from errors import ConfigError, UpstreamError

logger = logging.getLogger(__name__)


class ChatProxy:
    """Forward a question plus prior turns to the chat-completion API."""

    def __init__(self, api_key: Optional[str], model: str, client=None):
        """
        Args:
            api_key: OpenAI API key; None leaves the proxy unconfigured
            model: Model used for every request
            client: Preconstructed OpenAI-compatible client (default: built from api_key)
        """
        self.api_key = api_key
        self.model = model
        if client is None and api_key:
            client = OpenAI(api_key=api_key)
        self.client = client

    @property
    def configured(self) -> bool:
        return self.client is not None

    @staticmethod
    def build_messages(question: str, history: Optional[List[Dict]] = None) -> List[Dict]:
        """
        Prior turns followed by the new question.

        Example:
            >>> ChatProxy.build_messages("And in blue?", [{'role': 'user', 'content': 'Any shoes?'}])
            [{'role': 'user', 'content': 'Any shoes?'}, {'role': 'user', 'content': 'And in blue?'}]
        """
        messages = [{'role': t['role'], 'content': t['content']} for t in (history or [])]
        messages.append({'role': 'user', 'content': question})
        return messages

    def ask(self, question: str, history: Optional[List[Dict]] = None) -> str:
        """
        Returns:
            str: The model's answer

        Raises:
            ConfigError: no API key configured
            UpstreamError: the API call failed or returned no answer
        """
        if not self.configured:
            raise ConfigError("OpenAI API key is not set")

        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                messages=self.build_messages(question, history),
            )
            answer = completion.choices[0].message.content
        except Exception as e:
            logger.error(f"AI request error: {e}", exc_info=True)
            raise UpstreamError("AI request failed") from e

        if answer is None:
            raise UpstreamError("AI request failed")
        return answer
