from __future__ import annotations
import json
import logging
from typing import Any, Optional, TypeVar
import anthropic
import pydantic
from pydantic import BaseModel, TypeAdapter
from renovation_planner.config import Config

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class EnrichmentError(Exception):
    pass


class ValidationError(EnrichmentError):
    """Required input was missing, so no request was sent."""


class TransportError(EnrichmentError):
    """The call to the model service failed."""


class ShapeError(EnrichmentError):
    """The model answered, but not with the expected JSON shape."""


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if not text.startswith("```"):
        return text
    text = text.removeprefix("```")
    for lang in ("json", "JSON"):
        text = text.removeprefix(lang)
    return text.rsplit("```", 1)[0].strip()


def array_schema(model: type[BaseModel]) -> dict[str, Any]:
    return TypeAdapter(list[model]).json_schema(by_alias=True)  # type: ignore[valid-type]


def parse_json_array(text: str, model: type[M]) -> list[M]:
    """Parse ``text`` as a JSON array of ``model``, all-or-nothing."""
    try:
        data = json.loads(_strip_code_fence(text))
    except json.JSONDecodeError as e:
        raise ShapeError(f"Failed to parse model response as JSON: {e}") from e

    if not isinstance(data, list):
        raise ShapeError(f"Expected a JSON array from the model, got {type(data).__name__}")

    try:
        return [model.model_validate(entry) for entry in data]
    except pydantic.ValidationError as e:
        raise ShapeError(f"Model returned unexpected {model.__name__} format: {e}") from e


class GenerativeClient:
    """Thin async wrapper over the Anthropic messages API.

    Every transport failure surfaces as ``TransportError`` and every malformed
    answer as ``ShapeError``.
    """

    def __init__(self, config: Config, client: Optional[anthropic.AsyncAnthropic] = None):
        self.config = config
        self._client = client or anthropic.AsyncAnthropic(api_key=config.anthropic_api_key)

    async def generate(self, prompt: str, *, schema: Optional[dict[str, Any]] = None) -> str:
        system = self.config.system_prompt
        if schema is not None:
            system += (
                "\n\nReturn ONLY JSON that validates against this JSON Schema:\n"
                f"{json.dumps(schema, indent=2)}"
            )

        try:
            response = await self._client.messages.create(
                model=self.config.anthropic_model,
                max_tokens=self.config.max_tokens,
                system=system,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            raise TransportError(f"Request to {self.config.anthropic_model} failed: {e}") from e

        try:
            text = response.content[0].text
        except (IndexError, AttributeError) as e:
            raise ShapeError("Model returned an empty response") from e
        logger.debug("Model returned %d characters", len(text))
        return text.strip()

    async def generate_list(self, prompt: str, model: type[M]) -> list[M]:
        text = await self.generate(prompt, schema=array_schema(model))
        return parse_json_array(text, model)
