"""Success Envelope — every 2xx body is {statusCode, data, message, success: true}.

Invariants:
    - success is the single field clients branch on; failures come from
      VidshareError.to_response() with success: false
"""

from typing import Any

from vidshare.schemas.base import CamelModel


def _wire(data: Any) -> Any:
    if isinstance(data, CamelModel):
        return data.to_wire()
    if isinstance(data, (list, tuple)):
        return [_wire(item) for item in data]
    return data


def api_response(data: Any = None, message: str = "Success", status_code: int = 200) -> dict:
    return {
        "statusCode": status_code,
        "data": _wire(data) if data is not None else {},
        "message": message,
        "success": True,
    }
