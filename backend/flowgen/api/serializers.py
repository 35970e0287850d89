from enum import Enum
from typing import Any

from pydantic import BaseModel


PRIMITIVE_TYPES = (str, int, float, bool, type(None))


def serialize_ir(obj: Any):
    """
    Serialize pipeline objects into JSON-compatible structures.
    Pydantic models use their wire (alias) names.
    """

    if isinstance(obj, Enum):
        return obj.value

    if isinstance(obj, PRIMITIVE_TYPES):
        return obj

    if isinstance(obj, BaseModel):
        return obj.model_dump(by_alias=True, exclude_none=True)

    if isinstance(obj, (list, tuple)):
        return [serialize_ir(item) for item in obj]

    if isinstance(obj, dict):
        return {k: serialize_ir(v) for k, v in obj.items()}

    if hasattr(obj, "to_dict"):
        return obj.to_dict()

    if hasattr(obj, "__dict__"):
        return {
            key: serialize_ir(value)
            for key, value in obj.__dict__.items()
            if not key.startswith("_")
        }

    return str(obj)


def serialize_pipeline_result(result) -> dict:
    data = serialize_ir(result)
    return {"success": True, "step1": data["step1"], "step2": data["step2"]}


def error_payload(error: str, exc=None) -> dict:
    payload = {"error": error}
    if exc is not None:
        payload["message"] = getattr(exc, "message", str(exc))
        kind = getattr(exc, "kind", None)
        if kind:
            payload["kind"] = kind
    return payload
