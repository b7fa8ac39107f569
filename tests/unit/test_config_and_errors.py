"""설정/매장 구성/예외 계층 테스트"""
import pytest
from pydantic import ValidationError

from src.core.config import Settings
from src.core.exceptions import (
    GroceryCartException,
    InvalidInputException,
    SelectionParseException,
    SourceUnavailableException,
    ValidationException,
)
from src.core.stores import SearchConfig, StoreConfig, default_search_config
from src.schemas.product_schema import IngredientRequirement, Product


class TestSettings:
    def test_defaults(self):
        cfg = Settings()
        assert cfg.crawler_timeout_s == 30.0
        assert cfg.disco_result_cap is None
        assert cfg.tienda_inglesa_result_cap == 10
        assert cfg.tata_result_cap == 10
        assert cfg.openai_model == "gpt-4o-mini"

    def test_invalid_surcharge_range(self):
        with pytest.raises(ValidationError):
            Settings(price_imputation_surcharge_min=40, price_imputation_surcharge_max=20)

    def test_invalid_cap(self):
        with pytest.raises(ValidationError):
            Settings(tata_result_cap=0)


class TestStores:
    def test_default_order_and_metadata_keys(self):
        config = default_search_config(Settings(disco_result_cap=5))
        assert config.keys == ("disco", "tienda-inglesa", "tata")
        assert [s.metadata_key for s in config.stores] == ["disco", "tiendaInglesa", "tata"]
        assert config.get("disco").result_cap == 5
        assert config.get("devoto") is None

    def test_duplicate_keys_rejected(self):
        store = StoreConfig(key="disco", name="Disco", base_url="https://d", metadata_key="disco")
        with pytest.raises(ValueError):
            SearchConfig(stores=(store, store))

    def test_invalid_store_config(self):
        with pytest.raises(ValueError):
            StoreConfig(key="tata", name="Tata", base_url="https://t", metadata_key="tata", result_cap=0)


class TestExceptions:
    def test_hierarchy(self):
        e = InvalidInputException("q", "empty")
        assert isinstance(e, ValidationException)
        assert isinstance(e, GroceryCartException)
        assert e.error_code == "INVALID_INPUT"
        assert str(e).startswith("[INVALID_INPUT]")

    def test_source_unavailable_details(self):
        e = SourceUnavailableException("tata", "HTTP 503")
        assert e.error_code == "SOURCE_UNAVAILABLE"
        assert "tata" in e.message

    def test_parse_error_snippet_is_truncated(self):
        e = SelectionParseException("bad", snippet="x" * 1000)
        assert len(e.details["snippet"]) == 240


class TestSchemas:
    def test_product_accepts_camel_and_snake(self):
        a = Product.model_validate({"name": "Leche", "priceNumeric": 50, "storeName": "Disco"})
        b = Product(name="Leche", price_numeric=50, store_name="Disco")
        assert a == b
        assert a.model_dump(by_alias=True)["priceNumeric"] == 50

    def test_blank_ingredient_rejected(self):
        with pytest.raises(ValidationError):
            IngredientRequirement(ingredient="   ")
        assert IngredientRequirement(ingredient=" leche ").ingredient == "leche"
