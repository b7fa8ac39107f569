"""텍스트 정리 유틸"""

from __future__ import annotations

import re
from typing import Optional

_WS_RE = re.compile(r"\s+")


def clean_text(text: Optional[str]) -> Optional[str]:
    """줄바꿈/탭/연속 공백을 공백 하나로 줄이고 양끝 공백 제거. 빈 문자열은 None."""
    if not text:
        return None
    cleaned = _WS_RE.sub(" ", text).strip()
    return cleaned or None


def normalize_search_term(term: Optional[str]) -> str:
    """검색어 앞뒤 공백 제거 + 내부 공백 정리"""
    return clean_text(term) or ""
