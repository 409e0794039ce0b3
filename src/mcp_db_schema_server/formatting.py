"""
Response envelopes shared by the schema tools and the MCP handlers
"""

import json
from typing import Any, Dict


def format_success_response(payload: Any) -> Dict[str, Any]:
    """Wrap a payload in the success envelope.

    Payloads that already carry a ``success`` flag are envelopes and pass
    through unchanged.
    """
    if isinstance(payload, dict) and "success" in payload:
        return payload
    return {"success": True, "data": payload}


def to_json_text(envelope: Dict[str, Any]) -> str:
    return json.dumps(envelope, indent=2, ensure_ascii=False, default=str)
