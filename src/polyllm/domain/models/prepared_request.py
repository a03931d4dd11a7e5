"""PreparedRequest model - an HTTP request ready to be sent to a provider"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class PreparedRequest:
    """Endpoint, headers and serialized JSON body for one provider call"""

    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    def payload(self) -> Dict[str, Any]:
        """Decode the JSON body"""
        return json.loads(self.body)

    def redacted_headers(self) -> Dict[str, str]:
        """Headers with the bearer token masked, safe to print or log"""
        headers = dict(self.headers)
        if "Authorization" in headers:
            headers["Authorization"] = "Bearer ***"
        return headers
