"""Chat-completions response shapes shared by OpenAI-compatible vendors.

Explicit JSON nulls are accepted anywhere a missing field is, and read the
same way.
"""

from typing import Any, List, Optional

from pydantic import BaseModel


class FunctionPayload(BaseModel):
    name: Optional[str] = None
    arguments: Any = None  # raw JSON: vendors send either a string or an object


class ToolCallPayload(BaseModel):
    function: Optional[FunctionPayload] = None


class MessagePayload(BaseModel):
    content: Optional[str] = None
    tool_calls: Optional[List[Optional[ToolCallPayload]]] = None

    @property
    def functions(self) -> List[FunctionPayload]:
        """Function payloads of the tool calls, skipping null entries"""
        return [
            tool_call.function
            for tool_call in self.tool_calls or []
            if tool_call is not None and tool_call.function is not None
        ]


class ChoicePayload(BaseModel):
    message: Optional[MessagePayload] = None


class ChatCompletionResponse(BaseModel):
    """Subset of a chat-completions response that providers read.

    Unknown fields are ignored.
    """

    choices: Optional[List[Optional[ChoicePayload]]] = None

    @property
    def first_message(self) -> Optional[MessagePayload]:
        if not self.choices or self.choices[0] is None:
            return None
        return self.choices[0].message
