"""URL 정규화 유틸리티"""
from typing import Optional


def normalize_href(href: Optional[str], base_url: str) -> str:
    """상대/프로토콜-상대 href를 절대 URL로 정규화합니다.

    - "//host/path" -> "https://host/path"
    - "/path" -> "{base_url}/path"
    - "http(s)://..." -> 그대로
    - "path" (베이스 없는 상대 경로) -> "{base_url}/path"
    """
    if not href:
        return ""

    h = href.strip()
    if not h:
        return ""

    base = base_url.rstrip("/")

    if h.startswith("//"):
        return f"https:{h}"

    if h.startswith("/"):
        return f"{base}{h}"

    if h.lower().startswith(("http://", "https://")):
        return h

    return f"{base}/{h}"


def is_placeholder_src(src: Optional[str]) -> bool:
    """lazy-load 자리표시자 이미지(data: URI) 여부"""
    return bool(src) and src.strip().lower().startswith("data:")
