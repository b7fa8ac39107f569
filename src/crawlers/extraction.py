"""순서 있는 추출 전략 (ordered fallback selectors)

매장 마크업이 일부 바뀌어도 어댑터를 통째로 다시 쓰지 않도록
컨테이너/필드 추출을 '순서 있는 순수 함수 목록'으로 표현합니다.

- 컨테이너 전략: (tree) -> [Node]. 처음으로 비어있지 않은 결과를 내는 전략 사용.
- 필드 전략: (node) -> str | None. 필드마다 독립적으로 순서대로 시도.
  한 필드의 실패가 다른 필드 추출을 막지 않습니다.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from selectolax.parser import HTMLParser, Node

from src.core.logging import logger
from src.utils.text_utils import clean_text
from src.utils.url_utils import normalize_href, is_placeholder_src


@dataclass(frozen=True)
class ContainerStrategy:
    description: str
    find: Callable[[HTMLParser], List[Node]]

    def __call__(self, tree: HTMLParser) -> List[Node]:
        return self.find(tree)


@dataclass(frozen=True)
class FieldStrategy:
    description: str
    extract: Callable[[Node], Optional[str]]

    def __call__(self, node: Node) -> Optional[str]:
        return self.extract(node)


def node_text(node: Optional[Node]) -> Optional[str]:
    if node is None:
        return None
    return clean_text(node.text(deep=True, separator=" "))


def node_attr(node: Optional[Node], attr: str) -> Optional[str]:
    if node is None:
        return None
    return clean_text(node.attributes.get(attr))


def _descendants_with_attr(node: Node, attr: str) -> List[Node]:
    own_id = node.mem_id
    return [d for d in node.css(f"[{attr}]") if d.mem_id != own_id]


# ---------------------------------------------------------------------------
# 컨테이너 전략
# ---------------------------------------------------------------------------

def css_containers(selector: str) -> ContainerStrategy:
    return ContainerStrategy(f"css({selector})", lambda tree: list(tree.css(selector)))


def has_image(node: Node) -> bool:
    return node.css_first("img") is not None


def has_price_hint(node: Node) -> bool:
    text = node.text(deep=True, separator=" ") or ""
    return "$" in text or node.css_first('[class*="price"]') is not None


def attr_pattern_containers(
    attr: str,
    pattern: str,
    tags: Sequence[str] = ("div",),
    *,
    require_image: bool = False,
    require_price: bool = False,
) -> ContainerStrategy:
    """속성값이 정규식(대소문자 무시)에 맞는 요소.

    require_image/require_price로 '이미지와 통화 기호를 모두 가진 요소' 같은
    일반 휴리스틱을 표현합니다.
    """
    regex = re.compile(pattern, re.IGNORECASE)
    selector = ", ".join(f"{tag}[{attr}]" for tag in tags)

    def find(tree: HTMLParser) -> List[Node]:
        found: List[Node] = []
        for el in tree.css(selector):
            if not regex.search(el.attributes.get(attr) or ""):
                continue
            if require_image and not has_image(el):
                continue
            if require_price and not has_price_hint(el):
                continue
            found.append(el)
        return found

    flags = "".join(
        f"+{name}" for name, on in (("img", require_image), ("price", require_price)) if on
    )
    return ContainerStrategy(f"{'|'.join(tags)}[{attr}~/{pattern}/i]{flags}", find)


def class_pattern_containers(pattern: str, tags: Sequence[str] = ("div",), **kwargs) -> ContainerStrategy:
    return attr_pattern_containers("class", pattern, tags, **kwargs)


def find_containers(
    tree: HTMLParser,
    strategies: Sequence[ContainerStrategy],
    tag: str = "EXTRACT",
) -> Tuple[List[Node], Optional[str]]:
    """전략을 순서대로 시도해 첫 번째 비어있지 않은 결과 반환.

    Returns:
        (컨테이너 목록, 사용된 전략 설명). 모두 실패하면 ([], None)
    """
    for strategy in strategies:
        try:
            nodes = strategy(tree)
        except Exception as e:
            logger.debug(f"[{tag}] container strategy {strategy.description} failed: {type(e).__name__}: {e}")
            continue
        if nodes:
            logger.info(f"[{tag}] Using selector: {strategy.description} ({len(nodes)} elements)")
            return nodes, strategy.description
    return [], None


# ---------------------------------------------------------------------------
# 필드 전략
# ---------------------------------------------------------------------------

def text_at(selector: str, *, title_fallback: bool = False) -> FieldStrategy:
    """selector 첫 요소의 텍스트 (옵션: 텍스트가 없으면 title 속성)"""

    def extract(node: Node) -> Optional[str]:
        el = node.css_first(selector)
        if el is None:
            return None
        value = node_text(el)
        if not value and title_fallback:
            value = node_attr(el, "title")
        return value

    return FieldStrategy(f"text({selector})", extract)


def text_at_class(pattern: str) -> FieldStrategy:
    """class가 정규식(대소문자 무시)에 맞는 첫 하위 요소의 텍스트"""
    regex = re.compile(pattern, re.IGNORECASE)

    def extract(node: Node) -> Optional[str]:
        for el in _descendants_with_attr(node, "class"):
            if regex.search(el.attributes.get("class") or ""):
                return node_text(el)
        return None

    return FieldStrategy(f"text(class~/{pattern}/i)", extract)


def first_value(
    node: Node,
    strategies: Sequence[FieldStrategy],
    *,
    accept: Optional[Callable[[str], bool]] = None,
    tag: str = "EXTRACT",
) -> Optional[str]:
    """필드 전략을 순서대로 시도해 첫 번째로 허용되는 값 반환.

    accept가 있으면 값이 조건을 만족하지 않을 때 다음 전략으로 넘어갑니다.
    """
    for strategy in strategies:
        try:
            value = strategy(node)
        except Exception as e:
            logger.debug(f"[{tag}] field strategy {strategy.description} failed: {type(e).__name__}: {e}")
            continue
        if not value:
            continue
        if accept is not None and not accept(value):
            continue
        return value
    return None


def image_url(node: Node, base_url: str, attrs: Sequence[str] = ("src", "data-src", "data-lazy-src")) -> Optional[str]:
    """첫 img의 이미지 URL (lazy-load 자리표시자는 건너뜀)"""
    img = node.css_first("img")
    if img is None:
        return None
    for attr in attrs:
        src = img.attributes.get(attr)
        if not src or is_placeholder_src(src):
            continue
        return normalize_href(src, base_url) or None
    return None


def link_url(node: Node, base_url: str) -> Optional[str]:
    """첫 a[href]의 절대 URL (컨테이너 자신이 링크인 경우 포함)"""
    href = None
    if node.tag == "a":
        href = node.attributes.get("href")
    if not href:
        anchor = node.css_first("a[href]")
        href = anchor.attributes.get("href") if anchor is not None else None
    return normalize_href(href, base_url) or None
