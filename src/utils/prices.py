"""가격 문자열 파싱/표기 유틸.

우루과이 매장 표기(소수점 쉼표, 천 단위 점)를 기준으로 하되
달러+소수점 점 표기("$ 12.50")도 처리합니다.

    >>> parse_price("$ 1.234,56")
    1234.56
    >>> parse_price("44,20")
    44.2
    >>> parse_price("12345") is None
    True
"""

from __future__ import annotations

import re
from typing import Optional


# 통화 기호 뒤의 숫자 토큰. 긴 기호부터 매칭해야 "$U"가 "$"로 잘리지 않습니다.
_CURRENCY_AMOUNT_RE = re.compile(
    r"(?:U\$S|US\$|\$U|UYU|\$)\s*(\d+(?:[.,]\d+)*)",
    re.IGNORECASE,
)

# 통화 기호가 없을 때 허용하는 유일한 형태: 소수점 쉼표 (44,20 / 1.234,56)
_STRICT_DECIMAL_COMMA_RE = re.compile(r"(\d{1,3}(?:\.\d{3})+|\d+),\d{1,2}")

_THOUSANDS_DOT_RE = re.compile(r"\d{1,3}(?:\.\d{3})+")


def normalize_number_token(token: str) -> Optional[float]:
    """구분자가 섞인 숫자 토큰을 float로 변환.

    - 점/쉼표 모두 있음: 마지막 구분자가 소수점
    - 쉼표만: 뒤 숫자가 1~2자리면 소수점, 아니면 천 단위
    - 점만: 3자리씩 묶여 있으면 천 단위(1.234), 아니면 소수점(12.50)
    """
    if not token:
        return None

    t = token.strip()
    if "," in t and "." in t:
        if t.rfind(",") > t.rfind("."):
            t = t.replace(".", "").replace(",", ".")
        else:
            t = t.replace(",", "")
    elif "," in t:
        head, _, tail = t.rpartition(",")
        if t.count(",") == 1 and 1 <= len(tail) <= 2:
            t = f"{head}.{tail}"
        else:
            t = t.replace(",", "")
    elif "." in t:
        if _THOUSANDS_DOT_RE.fullmatch(t):
            t = t.replace(".", "")

    try:
        return round(float(t), 2)
    except ValueError:
        return None


def parse_price(text: Optional[str]) -> Optional[float]:
    """가격 문자열에서 숫자 가격 추출.

    통화 기호가 있거나 엄격한 소수점-쉼표 형태일 때만 가격으로 인정합니다.
    수량/ID 같은 숫자("12345", "500 g")는 None.
    """
    if not text:
        return None

    m = _CURRENCY_AMOUNT_RE.search(text)
    if m:
        return normalize_number_token(m.group(1))

    m = _STRICT_DECIMAL_COMMA_RE.fullmatch(text.strip())
    if m:
        return normalize_number_token(m.group(0))

    return None


def is_price_text(text: Optional[str]) -> bool:
    return parse_price(text) is not None


def extract_price_token(text: Optional[str]) -> Optional[str]:
    """자유 텍스트에서 첫 번째 통화 금액 부분 문자열 반환 (예: "$ 120")."""
    if not text:
        return None
    m = _CURRENCY_AMOUNT_RE.search(text)
    if not m:
        return None
    return re.sub(r"\s+", " ", m.group(0)).strip()


def format_price(value: float) -> str:
    """숫자 가격을 표시 문자열로 ("$ 120", "$ 89.50")."""
    rounded = round(float(value), 2)
    if rounded == int(rounded):
        return f"$ {int(rounded)}"
    return f"$ {rounded:.2f}"
