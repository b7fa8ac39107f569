"""Tienda Inglesa HTML 파싱 테스트 (네트워크 없음)"""
from src.crawlers.tienda_inglesa.parsing import parse_search_products

BASE = "https://www.tiendainglesa.com.uy"


def test_generic_card_heuristic(read_fixture):
    """알려진 셀렉터가 없으면 이미지+가격을 가진 card 요소를 컨테이너로 사용"""
    products = parse_search_products(read_fixture("tienda_inglesa_search.html"), BASE)

    # 이미지 없는 카드는 컨테이너 후보가 아님
    assert [p.name for p in products] == ["Leche Entera Conaprole 1 L", "Leche Descremada"]


def test_fields_of_first_card(read_fixture):
    leche = parse_search_products(read_fixture("tienda_inglesa_search.html"), BASE)[0]

    assert leche.price == "$U 52"
    assert leche.price_numeric == 52.0
    assert leche.availability == "Disponibles"
    assert leche.image_url == "https://www.tiendainglesa.com.uy/images/leche.jpg"
    assert leche.link == "https://www.tiendainglesa.com.uy/supermercado/leche-entera-conaprole-1-l/p/123"
    assert leche.description is None


def test_price_from_container_text(read_fixture):
    """가격 요소가 없으면 컨테이너 텍스트의 첫 통화 금액"""
    descremada = parse_search_products(read_fixture("tienda_inglesa_search.html"), BASE)[1]

    assert descremada.price == "$ 48,90"
    assert descremada.price_numeric == 48.9
    assert descremada.availability is None


def test_known_container_and_image_alt_name():
    html = """<!DOCTYPE html><html><body>
    <div class="product-item">
      <img src="/img/queso.jpg" alt="Queso Colonia">
      <span class="precio">$ 310,00</span>
    </div>
    </body></html>"""
    products = parse_search_products(html, BASE)

    assert len(products) == 1
    assert products[0].name == "Queso Colonia"
    assert products[0].price_numeric == 310.0
    assert products[0].image_url == "https://www.tiendainglesa.com.uy/img/queso.jpg"


def test_no_containers():
    assert parse_search_products("<html><body></body></html>", BASE) == []
