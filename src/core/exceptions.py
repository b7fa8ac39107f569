"""커스텀 예외 정의 (Structured Exception Hierarchy)"""
from typing import Any, Optional


class GroceryCartException(Exception):
    """기본 예외 클래스 - 모든 커스텀 예외의 부모"""
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


# 크롤러(매장 어댑터) 관련 예외
# NOTE: 어댑터 경계 밖으로 전파되지 않습니다. 어댑터가 잡아서 빈 결과로 변환합니다.
class CrawlerException(GroceryCartException):
    """크롤러 관련 예외의 기본 클래스"""
    def __init__(self, message: str, error_code: str = "CRAWLER_ERROR", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_code or "CRAWLER_ERROR", details)


class SourceUnavailableException(CrawlerException):
    """매장 응답 불가 (HTTP 오류, 네트워크 오류, 타임아웃)"""
    def __init__(self, store: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Store '{store}' unavailable: {reason}"
        super().__init__(message, "SOURCE_UNAVAILABLE",
                        details or {"store": store, "reason": reason})


class ParsingException(CrawlerException):
    """HTML/JSON 파싱 오류"""
    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Failed to parse response: {reason}"
        super().__init__(message, "PARSING_ERROR", details or {"reason": reason})


# 유효성 검증 관련 예외
class ValidationException(GroceryCartException):
    """유효성 검증 예외"""
    def __init__(self, field: str, reason: str, error_code: str = "VALIDATION_ERROR",
                 details: Optional[dict[str, Any]] = None):
        message = f"Validation failed for '{field}': {reason}"
        super().__init__(message, error_code,
                        details or {"field": field, "reason": reason})


class InvalidInputException(ValidationException):
    """잘못된 요청 (빈 검색어, 배열이 아닌 최적화 요청 등)"""
    def __init__(self, field: str, reason: str, details: Optional[dict[str, Any]] = None):
        super().__init__(field, reason, "INVALID_INPUT", details)


# LLM 상품 선택 관련 예외
class SelectionException(GroceryCartException):
    """상품 선택(LLM) 관련 예외의 기본 클래스"""
    def __init__(self, message: str, error_code: str = "SELECTION_ERROR", details: Optional[dict[str, Any]] = None):
        super().__init__(message, error_code or "SELECTION_ERROR", details)


class SelectionParseException(SelectionException):
    """LLM 응답에서 유효한 JSON 객체를 찾지 못함"""
    def __init__(self, reason: str, snippet: str = "", details: Optional[dict[str, Any]] = None):
        message = f"Could not decode selection response: {reason}"
        super().__init__(message, "SELECTION_PARSE_ERROR",
                        details or {"reason": reason, "snippet": snippet[:240]})


class SelectionRequestException(SelectionException):
    """LLM 호출 자체가 실패"""
    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Selection request failed: {reason}"
        super().__init__(message, "SELECTION_REQUEST_ERROR", details or {"reason": reason})


class LLMConfigurationException(SelectionException):
    """LLM 설정 누락 (API 키 등)"""
    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None):
        super().__init__(reason, "LLM_CONFIG_ERROR", details)
