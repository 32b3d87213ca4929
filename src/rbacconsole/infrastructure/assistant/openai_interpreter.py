"""OpenAI-compatible command interpreter."""

import json
import logging
import re

from openai import APIError, APIStatusError, AsyncOpenAI, RateLimitError

from rbacconsole.application.dto.assistant_dto import AssistantCommand
from rbacconsole.domain.value_objects import AssistantAction
from rbacconsole.infrastructure.assistant.prompts import SYSTEM_PROMPT

logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")

RATE_LIMITED_MESSAGE = "Rate limit exceeded. Please try again in a moment."
CREDITS_EXHAUSTED_MESSAGE = "AI credits exhausted. Please add credits to continue."


def parse_reply(content: str | None) -> AssistantCommand:
    """Extract the JSON action from a model reply.

    The object may be wrapped in prose or a markdown fence. Anything that
    does not parse becomes an info command carrying the raw text.
    """
    content = content or ""
    match = _JSON_OBJECT.search(content)
    if match:
        try:
            payload = json.loads(match.group(0))
        except json.JSONDecodeError:
            payload = None
        if isinstance(payload, dict):
            return AssistantCommand.from_payload(payload)
    return AssistantCommand(action=AssistantAction.INFO, message=content)


class OpenAICommandInterpreter:
    """Command interpreter using an OpenAI-compatible chat completions API."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        model: str,
    ) -> None:
        self._client = AsyncOpenAI(base_url=base_url, api_key=api_key)
        self._model = model

    async def interpret(self, message: str) -> AssistantCommand:
        """Ask the model for an action. Transport failures become error commands."""
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": message},
                ],
            )
        except RateLimitError:
            logger.warning("Assistant model rate limited")
            return AssistantCommand(action=AssistantAction.ERROR, message=RATE_LIMITED_MESSAGE)
        except APIStatusError as e:
            logger.warning("Assistant model error: %s %s", e.status_code, e.message)
            if e.status_code == 402:
                return AssistantCommand(
                    action=AssistantAction.ERROR, message=CREDITS_EXHAUSTED_MESSAGE
                )
            return AssistantCommand(
                action=AssistantAction.ERROR, message=f"AI gateway error: {e.status_code}"
            )
        except APIError as e:
            logger.warning("Assistant model unreachable: %s", e)
            return AssistantCommand(action=AssistantAction.ERROR, message=str(e))

        content = response.choices[0].message.content if response.choices else None
        logger.debug("Assistant reply: %s", content)
        return parse_reply(content)
