from __future__ import annotations

import json
import logging
import re
from time import monotonic
from typing import Optional

import requests

from .config import Settings
from .models import PostMeta, build_envelope
from .parser import parse_cancellation_html


class UpstreamError(Exception):
    pass


class PostNotFound(UpstreamError):
    def __init__(self, post_id: str) -> None:
        super().__init__(f"Post {post_id} not found")
        self.post_id = post_id


class UpstreamStatusError(UpstreamError):
    def __init__(self, status_code: int) -> None:
        super().__init__(f"WordPress API Error: {status_code}")
        self.status_code = status_code


class UpstreamTimeout(UpstreamError):
    pass


class InvalidPostId(ValueError):
    pass


POST_ID_REGEX = re.compile(r"[0-9]+")
CHUNK_SIZE = 8192


def validate_post_id(post_id: str) -> str:
    post_id = str(post_id).strip()
    if not POST_ID_REGEX.fullmatch(post_id):
        raise InvalidPostId(f"Invalid post id '{post_id}'")
    return post_id


def post_url(post_id: str, settings: Settings) -> str:
    return f"{settings.base_api_url}/{validate_post_id(post_id)}"


def _read_body(resp, deadline: float, url: str) -> bytes:
    # requests' timeout only bounds each connect / socket read, so a slowly
    # trickling body is cut off against the overall deadline here.
    chunks = []
    for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
        chunks.append(chunk)
        if monotonic() > deadline:
            raise UpstreamTimeout(f"Body of {url} not received before deadline")
    return b"".join(chunks)


def fetch_post(post_id: str, settings: Settings, session: Optional[requests.Session] = None) -> dict:
    """Fetch one WordPress post as a dict.

    Single attempt. ``settings.fetch_timeout`` limits each socket read and also
    the total time spent receiving the body.
    """
    url = post_url(post_id, settings)
    http = session or requests
    logging.info("Fetching %s", url)
    deadline = monotonic() + settings.fetch_timeout
    try:
        resp = http.get(url, timeout=settings.fetch_timeout, headers={"Accept": "application/json"}, stream=True)
        try:
            if resp.status_code == 404:
                raise PostNotFound(post_id)
            if not resp.ok:
                raise UpstreamStatusError(resp.status_code)
            body = _read_body(resp, deadline, url)
        finally:
            resp.close()
    except requests.Timeout as exc:
        raise UpstreamTimeout(f"Timed out after {settings.fetch_timeout}s fetching {url}") from exc
    except requests.RequestException as exc:
        raise UpstreamError(f"Request to {url} failed: {exc}") from exc

    try:
        post = json.loads(body)
    except ValueError as exc:
        raise UpstreamError(f"Response from {url} is not JSON") from exc
    if not isinstance(post, dict):
        raise UpstreamError(f"Unexpected response shape from {url}: {type(post).__name__}")
    return post


def post_content(post: dict) -> str:
    content = post.get("content") or {}
    if not isinstance(content, dict):
        return ""
    return content.get("rendered") or ""


def fetch_cancellations(post_id: str, settings: Settings, session: Optional[requests.Session] = None) -> dict:
    post = fetch_post(post_id, settings, session=session)
    records = parse_cancellation_html(post_content(post))
    logging.info("Post %s: %d records", post_id, len(records))
    return build_envelope(PostMeta.from_wp_post(post), records)
