from __future__ import annotations
import json
from pathlib import Path
from typing import Dict, List, Tuple

from .records import ApiResponse

SAMPLE_DIR = Path(__file__).with_name("examples")

# number -> (button label, file under examples/)
SAMPLES: Dict[int, Tuple[str, str]] = {
    1: ("Excel Spreadsheet", "example-output-small.json"),
    2: ("PowerPoint Slide", "example-output-mid.json"),
}

def sample_labels() -> List[Tuple[int, str]]:
    return [(n, label) for n, (label, _) in SAMPLES.items()]

def load_sample(number: int) -> ApiResponse:
    """Return a fresh copy of a bundled example response."""
    if number not in SAMPLES:
        valid = ", ".join(str(n) for n in SAMPLES)
        raise KeyError(f"Unknown sample {number!r}; choose one of: {valid}")
    _, fname = SAMPLES[number]
    return json.loads((SAMPLE_DIR / fname).read_text(encoding="utf-8"))
