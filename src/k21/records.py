from __future__ import annotations
import json
from pathlib import Path
from typing import Any, List, Mapping, TypedDict, Union

class OcrFrame(TypedDict, total=False):
    ocr_text: str
    time_id: str

class ApiResponse(TypedDict, total=False):
    base64_data: str
    status: str
    message: str
    success: bool
    result: List[OcrFrame]

def frame_text(frame: Any) -> str:
    """Text of one OCR entry; anything that is not a string counts as empty."""
    if not isinstance(frame, Mapping):
        return ""
    # wire name first, plain "text" for records built by hand
    value = frame.get("ocr_text", frame.get("text"))
    return value if isinstance(value, str) else ""

def has_result(response: Any) -> bool:
    return isinstance(response, Mapping) and isinstance(response.get("result"), list)

def fragments_from_response(response: Any) -> List[str]:
    if not has_result(response):
        return []
    return [frame_text(f) for f in response["result"]]

def load_response(path: Union[str, Path]) -> ApiResponse:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object, got {type(data).__name__}")
    return data  # type: ignore[return-value]
