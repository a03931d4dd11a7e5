"""OpenAI LLM provider (OpenAI-compatible chat completions)."""

from __future__ import annotations

from typing import Any, Dict

from polyllm.infrastructure.llm.openai_compatible import OpenAICompatibleChatProvider


class OpenAIProvider(OpenAICompatibleChatProvider):
    """OpenAI API provider."""

    NAME = "openai"
    API_URL = "https://api.openai.com/v1/chat/completions"
    SCHEMA_NAME = "structured_response"

    @property
    def supports_json_schema(self) -> bool:
        return True

    def _response_format(self, schema: Any, strict: bool) -> Dict[str, Any]:
        json_schema: Dict[str, Any] = {"name": self.SCHEMA_NAME, "schema": schema}
        if strict:
            json_schema["strict"] = True
        return {"type": "json_schema", "json_schema": json_schema}
