"""FunctionCall model - a tool call requested by the model"""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class FunctionCall:
    """Decoded function call: the tool name and its arguments"""

    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)
