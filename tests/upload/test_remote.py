import pytest
import requests
import k21.upload as upload
from k21.upload import UploadError, submit_video, upload_video

URL = "http://ocr.local/upload"

class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self._text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        if self._text is not None:
            raise ValueError("not json")
        return self._body

def _fake_post(resp=None, exc=None, calls=None):
    def post(url, files=None, timeout=None):
        if calls is not None:
            calls.append({"url": url, "files": files, "timeout": timeout})
        if exc is not None:
            raise exc
        return resp
    return post

def test_posts_video_field(monkeypatch):
    calls = []
    body = {"success": True, "result": [{"ocr_text": "hi", "time_id": "0"}]}
    monkeypatch.setattr(upload.requests, "post", _fake_post(FakeResponse(body=body), calls=calls))
    out = upload_video(b"\x00\x01", "clip.mp4", url=URL, timeout=7)
    assert out == body
    assert calls[0]["url"] == URL
    assert calls[0]["timeout"] == 7
    assert calls[0]["files"]["video"] == ("clip.mp4", b"\x00\x01", "video/mp4")

def test_connection_error(monkeypatch):
    monkeypatch.setattr(upload.requests, "post", _fake_post(exc=requests.exceptions.ConnectionError("refused")))
    with pytest.raises(UploadError, match="Could not reach processing service"):
        upload_video(b"x", "clip.mp4", url=URL)

def test_timeout(monkeypatch):
    monkeypatch.setattr(upload.requests, "post", _fake_post(exc=requests.exceptions.ReadTimeout("slow")))
    with pytest.raises(UploadError, match="timed out after 3s"):
        upload_video(b"x", "clip.mp4", url=URL, timeout=3)

def test_http_error_includes_service_message(monkeypatch):
    resp = FakeResponse(status_code=413, body={"success": False, "message": "Video too long"})
    monkeypatch.setattr(upload.requests, "post", _fake_post(resp))
    with pytest.raises(UploadError, match="HTTP 413: Video too long"):
        upload_video(b"x", "clip.mp4", url=URL)

def test_http_error_without_body(monkeypatch):
    monkeypatch.setattr(upload.requests, "post", _fake_post(FakeResponse(status_code=500, text="oops")))
    with pytest.raises(UploadError) as ei:
        upload_video(b"x", "clip.mp4", url=URL)
    assert str(ei.value) == "Upload failed with HTTP 500"

def test_invalid_json(monkeypatch):
    monkeypatch.setattr(upload.requests, "post", _fake_post(FakeResponse(text="<html>")))
    with pytest.raises(UploadError, match="invalid JSON"):
        upload_video(b"x", "clip.mp4", url=URL)

def test_non_object_json(monkeypatch):
    monkeypatch.setattr(upload.requests, "post", _fake_post(FakeResponse(body=[1, 2])))
    with pytest.raises(UploadError, match="unexpected response"):
        upload_video(b"x", "clip.mp4", url=URL)

def test_unsuccessful_body_is_returned(monkeypatch):
    body = {"success": False, "message": "no text found"}
    monkeypatch.setattr(upload.requests, "post", _fake_post(FakeResponse(body=body)))
    assert upload_video(b"x", "clip.mp4", url=URL) == body

def test_submit_remote_uses_env_url(monkeypatch):
    calls = []
    monkeypatch.setenv("K21_UPLOAD_URL", URL)
    monkeypatch.delenv("K21_BACKEND", raising=False)
    monkeypatch.setattr(upload.requests, "post", _fake_post(FakeResponse(body={"result": []}), calls=calls))
    assert submit_video(b"x", "clip.mp4") == {"result": []}
    assert calls[0]["url"] == URL

def test_submit_remote_without_url(monkeypatch):
    monkeypatch.delenv("K21_UPLOAD_URL", raising=False)
    with pytest.raises(UploadError, match="K21_UPLOAD_URL"):
        submit_video(b"x", "clip.mp4", backend="remote")

def test_submit_validates_before_sending(monkeypatch):
    calls = []
    monkeypatch.setattr(upload.requests, "post", _fake_post(FakeResponse(body={}), calls=calls))
    with pytest.raises(UploadError, match="MP4"):
        submit_video(b"x", "clip.avi", backend="remote", url=URL)
    assert calls == []
