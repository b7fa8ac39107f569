"""LLM 선택 응답 파서

모델 응답은 마크다운 코드 펜스나 앞뒤 설명문이 섞여 올 수 있습니다.
1. ``` 펜스 제거
2. 문자열/이스케이프를 고려해 균형 잡힌 첫 번째 {...} 탐색
3. JSON 객체로 디코딩되는 첫 후보를 SelectionPayload로 검증

모델이 되돌려준 보조 필드(가격, 수량 등)는 타입이 달라도 거부하지 않습니다.
해석할 수 없는 값은 None으로 버리고, 보강 단계에서 후보 상품 값으로 대체됩니다.
"""

import json
import re
from typing import Any, Iterator, List, Optional

from pydantic import Field, ValidationError, field_validator

from src.core.exceptions import SelectionParseException
from src.core.logging import logger
from src.schemas.product_schema import CamelModel
from src.utils.prices import format_price, parse_price


def lenient_text(value: Any) -> Optional[str]:
    """문자열은 그대로, 숫자는 문자열로, 그 외(객체/목록/불리언)는 None"""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    return None


def lenient_number(value: Any) -> Optional[float]:
    """숫자, 숫자 문자열("2", "1,5"), 가격 문자열("$ 50")을 float로. 해석 불가면 None"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        return None
    parsed = parse_price(value)
    if parsed is not None:
        return parsed
    try:
        return float(value.strip().replace(",", "."))
    except ValueError:
        return None


class SelectedProduct(CamelModel):
    """모델이 고른 상품 (축소 필드 + 모델이 되돌려준 가격 필드)"""
    name: Optional[str] = None
    brand: Optional[str] = None
    price: Optional[str] = None
    price_numeric: Optional[float] = None
    store: Optional[str] = None

    @field_validator("name", "brand", "store", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Optional[str]:
        return lenient_text(v)

    @field_validator("price", mode="before")
    @classmethod
    def coerce_price(cls, v: Any) -> Optional[str]:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return format_price(v)
        return lenient_text(v)

    @field_validator("price_numeric", mode="before")
    @classmethod
    def coerce_price_numeric(cls, v: Any) -> Optional[float]:
        return lenient_number(v)


class SelectedItem(CamelModel):
    ingredient: str
    quantity: Optional[float] = None
    unit: Optional[str] = None
    product: SelectedProduct

    @field_validator("quantity", mode="before")
    @classmethod
    def coerce_quantity(cls, v: Any) -> Optional[float]:
        return lenient_number(v)

    @field_validator("unit", mode="before")
    @classmethod
    def coerce_unit(cls, v: Any) -> Optional[str]:
        return lenient_text(v)


class SelectedCart(CamelModel):
    store: str
    store_name: Optional[str] = None
    items: List[SelectedItem] = Field(default_factory=list)
    total: Optional[float] = None

    @field_validator("store_name", mode="before")
    @classmethod
    def coerce_store_name(cls, v: Any) -> Optional[str]:
        return lenient_text(v)

    @field_validator("total", mode="before")
    @classmethod
    def coerce_total(cls, v: Any) -> Optional[float]:
        return lenient_number(v)


class SelectionPayload(CamelModel):
    carts: List[SelectedCart] = Field(default_factory=list)


_FENCE_RE = re.compile(r"```(?:json|JSON)?")


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


def iter_json_objects(text: str) -> Iterator[str]:
    """균형 잡힌 {...} 구간을 앞에서부터 차례로 반환 (문자열 안의 괄호는 무시)"""
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        end = None
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    end = i
                    break
        if end is None:
            return
        yield text[start:end + 1]
        start = text.find("{", start + 1)


def parse_selection(text: str) -> SelectionPayload:
    """모델 원문 -> SelectionPayload

    Raises:
        SelectionParseException: JSON 객체를 찾지 못했거나 형식이 맞지 않는 경우
    """
    if not text or not text.strip():
        raise SelectionParseException("empty response", snippet=text or "")

    cleaned = strip_code_fences(text)
    payload = None
    for candidate in iter_json_objects(cleaned):
        try:
            decoded = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(decoded, dict):
            payload = decoded
            break

    if payload is None:
        logger.warning(f"[SELECTION] No JSON object in response ({len(text)} chars)")
        raise SelectionParseException("no JSON object found in response", snippet=text)

    try:
        return SelectionPayload.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"[SELECTION] Invalid selection shape: {e.error_count()} errors")
        raise SelectionParseException(f"invalid selection shape: {e.errors()[0]['msg']}", snippet=text) from e
