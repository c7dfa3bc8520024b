from typing import Any, Dict


def success(data: Any = None, message: str = "", **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    body.update(extra)
    body["message"] = message
    return body


def failure(message: str) -> Dict[str, Any]:
    return {"success": False, "error": message}
