"""우루과이 슈퍼마켓 상품 탐색 및 장바구니 최적화 서비스"""

__version__ = "1.0.0"
