"""
出站 HTTP 客户端：共享连接池的 requests.Session。

只返回响应体字节，不按状态码判错；网络层异常统一包装为 HttpClientError。
"""

from __future__ import annotations

import json
import logging
import threading

import requests
from django.conf import settings
from requests.adapters import HTTPAdapter

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json;charset=utf-8"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class HttpClientError(Exception):
    """出站请求失败（连接、超时等）。"""


class HttpClient:
    def __init__(self, timeout: float = 600.0, pool_maxsize: int = 1000):
        self.timeout = timeout
        self.session = requests.Session()
        adapter = HTTPAdapter(pool_connections=pool_maxsize, pool_maxsize=pool_maxsize)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def _send(self, method: str, url: str, **kwargs) -> bytes:
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.error("[HTTP] %s %s 请求失败: %s", method, url, exc)
            raise HttpClientError(f"http {method.lower()} failed: {url}") from exc
        return response.content

    @staticmethod
    def _headers(cookie: str | None, content_type: str | None = None, extra: dict | None = None) -> dict:
        headers = {}
        if content_type:
            headers["Content-Type"] = content_type
        if cookie:
            headers["Cookie"] = cookie
        for key, value in (extra or {}).items():
            if key and value is not None:
                headers[key] = value
        return headers

    def get_bytes(self, url: str, cookie: str | None = None) -> bytes:
        return self._send("GET", url, headers=self._headers(cookie))

    def post_bytes(
        self,
        url: str,
        body,
        cookie: str | None = None,
        headers: dict | None = None,
    ) -> bytes:
        """POST JSON；body 为 dict/list 时先序列化。"""
        if not isinstance(body, (str, bytes)):
            body = json.dumps(body, ensure_ascii=False)
        if isinstance(body, str):
            body = body.encode("utf-8")
        return self._send(
            "POST",
            url,
            data=body,
            headers=self._headers(cookie, JSON_CONTENT_TYPE, headers),
        )

    def post_form(self, url: str, params: dict | None) -> bytes:
        form = {
            key: value
            for key, value in (params or {}).items()
            if key is not None and value is not None
        }
        return self._send("POST", url, data=form, headers=self._headers(None, FORM_CONTENT_TYPE))

    def close(self) -> None:
        self.session.close()


_client: HttpClient | None = None
_client_lock = threading.Lock()


def get_http_client() -> HttpClient:
    global _client
    with _client_lock:
        if _client is None:
            config = getattr(settings, "HTTP_CLIENT", {})
            _client = HttpClient(
                timeout=float(config.get("TIMEOUT", 600.0)),
                pool_maxsize=int(config.get("POOL_MAXSIZE", 1000)),
            )
        return _client
