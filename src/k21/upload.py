# src/k21/upload.py
from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests
from loguru import logger

from . import settings
from .frequency import analyze
from .records import ApiResponse, fragments_from_response
from .samples import load_sample

logger = logger.bind(name="upload")

MP4_TYPE = "video/mp4"
FORM_FIELD = "video"


class UploadError(RuntimeError):
    """User-facing failure while validating or submitting a video."""


def validate_video(filename: Optional[str], size: Optional[int], content_type: Optional[str] = None) -> None:
    """Raise UploadError unless this looks like an MP4 within the size limit."""
    if not filename:
        raise UploadError("Please select a file to upload")
    if content_type:
        is_mp4 = content_type.split(";")[0].strip().lower() == MP4_TYPE
    else:
        is_mp4 = Path(filename).suffix.lower() == ".mp4"
    if not is_mp4:
        raise UploadError("Please select an MP4 file")
    if not size:
        raise UploadError("Selected file is empty")
    limit_mb = settings.max_upload_mb()
    if size > limit_mb * 1024 * 1024:
        raise UploadError(f"File exceeds the {limit_mb} MB upload limit")


def _service_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return ""
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return ""


def upload_video(data: bytes, filename: str, *, url: str, timeout: Optional[float] = None) -> ApiResponse:
    """
    POST the video as multipart form field "video" and return the service's JSON.
    No retries: any transport failure surfaces as UploadError.
    """
    timeout = settings.upload_timeout() if timeout is None else timeout
    files = {FORM_FIELD: (filename, data, MP4_TYPE)}
    logger.info(f"Uploading {filename} ({len(data)} bytes) to {url}")
    t0 = time.time()
    try:
        resp = requests.post(url, files=files, timeout=timeout)
        resp.raise_for_status()
    except requests.exceptions.ConnectionError as e:
        raise UploadError(f"Could not reach processing service at {url}") from e
    except requests.exceptions.Timeout as e:
        raise UploadError(f"Processing service timed out after {timeout:g}s") from e
    except requests.exceptions.HTTPError as e:
        detail = _service_message(resp)
        msg = f"Upload failed with HTTP {resp.status_code}"
        raise UploadError(f"{msg}: {detail}" if detail else msg) from e
    except requests.exceptions.RequestException as e:
        raise UploadError(f"An error occurred during upload: {e}") from e

    try:
        body = resp.json()
    except ValueError as e:
        raise UploadError("Processing service returned invalid JSON") from e
    if not isinstance(body, dict):
        raise UploadError("Processing service returned an unexpected response")

    logger.info(f"Upload of {filename} finished in {int((time.time() - t0) * 1000)} ms")
    if body.get("success") is False:
        logger.warning(f"Service reported failure for {filename}: {body.get('message', '')}")
    return body  # type: ignore[return-value]


def upload_mock(data: bytes, filename: str, *, delay_s: Optional[float] = None) -> ApiResponse:
    """Pretend to process the video: wait, then hand back the first bundled example."""
    delay_s = settings.mock_delay_s() if delay_s is None else max(0.0, delay_s)
    logger.info(f"Mock processing {filename} ({len(data)} bytes), delay {delay_s:g}s")
    if delay_s:
        time.sleep(delay_s)
    return load_sample(1)


def submit_video(
    data: bytes,
    filename: str,
    *,
    backend: Optional[str] = None,
    content_type: Optional[str] = None,
    url: Optional[str] = None,
    delay_s: Optional[float] = None,
) -> ApiResponse:
    validate_video(filename, len(data) if data is not None else None, content_type)
    backend = (backend or settings.backend()).lower()
    if backend == "mock":
        return upload_mock(data, filename, delay_s=delay_s)
    if backend == "remote":
        url = url or settings.upload_url()
        if not url:
            raise UploadError("No processing service URL configured (set K21_UPLOAD_URL)")
        return upload_video(data, filename, url=url)
    raise UploadError(f"Unknown processing backend: {backend!r} (expected 'mock' or 'remote')")


def _print_ranked(response: Dict[str, Any], k: int) -> None:
    ranked = analyze(fragments_from_response(response), k)
    print(f"\n--- top {k} words ---")
    for word, count in ranked:
        print(f"{count:6d}  {word}")


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="k21.upload", description="Submit an MP4 for OCR and print the response.")
    ap.add_argument("video", help="Path to an .mp4 file")
    ap.add_argument("--backend", choices=["mock", "remote"], default=None,
                    help="Processing backend (default from K21_BACKEND / K21_UPLOAD_URL)")
    ap.add_argument("--url", default=None, help="Processing service URL (overrides K21_UPLOAD_URL)")
    ap.add_argument("--top", type=int, default=None, help="Also print the N most frequent words")
    ap.add_argument("--out", default=None, help="Write the response JSON to this file")
    args = ap.parse_args(argv)

    if args.top is not None and args.top < 1:
        print("--top must be a positive integer", file=sys.stderr)
        return 2

    video = Path(args.video)
    if not video.is_file():
        print(f"Video not found: {video}", file=sys.stderr)
        return 2

    try:
        res = submit_video(video.read_bytes(), video.name, backend=args.backend, url=args.url)
    except UploadError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    text = json.dumps(res, indent=2, ensure_ascii=False)
    if args.out:
        outp = Path(args.out)
        outp.parent.mkdir(parents=True, exist_ok=True)
        outp.write_text(text + "\n", encoding="utf-8")
        logger.info(f"Wrote response to {outp}")
    print(text)
    if args.top is not None:
        _print_ranked(res, args.top)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
