import json
import socket
from typing import Any
from urllib import request
from urllib.error import HTTPError, URLError


class HTTPStatusError(RuntimeError):
    def __init__(self, url: str, status_code: int, body: str = ""):
        self.url = url
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code} calling {url}: {body}")


def post_json(url: str, payload: dict, timeout: float = 120) -> dict[str, Any]:
    data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
    req = request.Request(
        url,
        data=data,
        headers={"Content-Type": "application/json"},
        method="POST",
    )
    try:
        with request.urlopen(req, timeout=timeout) as resp:
            raw = resp.read().decode("utf-8")
    except HTTPError as exc:
        body = exc.read().decode("utf-8") if exc.fp else ""
        raise HTTPStatusError(url, exc.code, body) from exc
    except URLError as exc:
        if isinstance(exc.reason, (socket.timeout, TimeoutError)):
            raise TimeoutError(f"Timed out calling {url} after {timeout}s") from exc
        raise ConnectionError(f"Cannot reach {url}: {exc.reason}") from exc
    except (socket.timeout, TimeoutError) as exc:
        raise TimeoutError(f"Timed out calling {url} after {timeout}s") from exc

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Malformed JSON from {url}: {raw[:200]}") from exc
    if not isinstance(payload, dict):
        raise ValueError(f"Expected a JSON object from {url}, got {type(payload).__name__}")
    return payload
