"""Mistral AI provider (OpenAI-compatible chat completions)."""

from __future__ import annotations

from typing import Any, Dict

from polyllm.infrastructure.llm.openai_compatible import OpenAICompatibleChatProvider


class MistralProvider(OpenAICompatibleChatProvider):
    """Mistral AI API provider.

    Supported options include ``temperature``, ``max_tokens``, ``top_p``
    and ``seed``. Structured output is requested with a ``json_schema``
    response format carrying the schema inline.
    """

    NAME = "mistral"
    API_URL = "https://api.mistral.ai/v1/chat/completions"

    @property
    def supports_json_schema(self) -> bool:
        return True

    def _response_format(self, schema: Any, strict: bool) -> Dict[str, Any]:
        response_format: Dict[str, Any] = {"type": "json_schema", "schema": schema}
        if strict:
            response_format["strict"] = True
        return response_format
