"""
Catalog search and record normalization unit tests
"""
import httpx
import pytest

from app.schemas.storefront import ProductSearchRequest
from app.services.airtable import AirtableClient, AirtableError
from app.services.catalog import MAX_SEARCH_RESULTS, record_to_product, search_products
from tests.helpers import airtable_page, connect_error, run, status

PRODUCT_FIELDS = {
    "id",
    "product_id",
    "title",
    "brand",
    "category",
    "tags",
    "short_description",
    "price",
    "bag_size_cf",
    "in_stock",
    "image_url",
    "use_case",
    "voice_script_30S",
}


def _search(settings, handler, request: ProductSearchRequest):
    """Run search_products against a mocked Airtable, returning (products, sent)."""
    sent: list[httpx.Request] = []

    def _record(req: httpx.Request) -> httpx.Response:
        sent.append(req)
        return handler(req)

    async def _go():
        client = AirtableClient(settings=settings, transport=httpx.MockTransport(_record))
        try:
            return await search_products(client, request, settings)
        finally:
            await client.close()

    return run(_go()), sent


class TestRecordToProduct:
    """Airtable record projection"""

    def test_all_fields_projected(self, sample_record):
        product = record_to_product(sample_record)
        data = product.model_dump()

        assert set(data) == PRODUCT_FIELDS
        assert data["id"] == "recSOIL001"
        assert data["title"] == "EcoMix Potting Soil"
        assert data["price"] == 12.99

    def test_hyphenated_store_fields_are_renamed(self, sample_record):
        product = record_to_product(sample_record)

        assert product.bag_size_cf == 1.5
        assert product.use_case == "Containers and raised beds"

    def test_missing_fields_are_none(self):
        product = record_to_product({"id": "recBARE", "fields": {"title": "Bare Bag"}})
        data = product.model_dump()

        assert data["title"] == "Bare Bag"
        assert all(data[name] is None for name in PRODUCT_FIELDS - {"id", "title"})

    def test_list_valued_fields_are_passed_through(self, sample_record):
        sample_record["fields"].update(
            {
                "title": ["EcoMix Potting Soil"],
                "brand": ["recBRAND1"],
                "category": ["potting-soil", "containers"],
                "short_description": ["Light organic mix."],
                "in_stock": [True],
                "voice_script_30S": ["EcoMix keeps roots airy."],
            }
        )
        data = record_to_product(sample_record).model_dump()

        assert data["title"] == ["EcoMix Potting Soil"]
        assert data["brand"] == ["recBRAND1"]
        assert data["category"] == ["potting-soil", "containers"]
        assert data["short_description"] == ["Light organic mix."]
        assert data["in_stock"] == [True]
        assert data["voice_script_30S"] == ["EcoMix keeps roots airy."]

    def test_record_without_fields_key(self):
        product = record_to_product({"id": "recEMPTY"})
        assert product.id == "recEMPTY"
        assert product.title is None


class TestSearchProducts:
    """search_products against a mocked Airtable"""

    def test_query_parameters(self, settings, sample_record):
        request = ProductSearchRequest(category="potting-soil", tags=["organic"])
        products, sent = _search(settings, airtable_page([sample_record]), request)

        assert len(products) == 1
        assert len(sent) == 1

        req = sent[0]
        assert req.method == "GET"
        assert req.url.path == "/v0/appTESTBASE/Products"
        assert req.headers["authorization"] == "Bearer at-test-key"
        assert req.url.params["filterByFormula"] == (
            "AND({in_stock} = TRUE(), {category} = 'potting-soil', OR(FIND('organic', {tags})))"
        )
        assert req.url.params["maxRecords"] == "10"
        assert req.url.params["sort[0][field]"] == "title"
        assert req.url.params["sort[0][direction]"] == "asc"

    def test_free_text_query_does_not_change_formula(self, settings):
        request = ProductSearchRequest(query="something for tomatoes")
        _, sent = _search(settings, airtable_page([]), request)

        assert sent[0].url.params["filterByFormula"] == "AND({in_stock} = TRUE())"

    def test_result_is_capped_at_ten(self, settings):
        records = [
            {"id": f"rec{i:02d}", "fields": {"title": f"Soil {i:02d}"}} for i in range(12)
        ]
        products, _ = _search(settings, airtable_page(records), ProductSearchRequest())

        assert len(products) == MAX_SEARCH_RESULTS
        assert [p.id for p in products] == [f"rec{i:02d}" for i in range(10)]

    def test_store_order_is_kept(self, settings):
        records = [
            {"id": "recA", "fields": {"title": "Azalea Mix"}},
            {"id": "recB", "fields": {"title": "Bulb Booster"}},
            {"id": "recC", "fields": {"title": "Cactus Blend"}},
        ]
        products, _ = _search(settings, airtable_page(records), ProductSearchRequest())

        assert [p.title for p in products] == ["Azalea Mix", "Bulb Booster", "Cactus Blend"]

    def test_follows_offset_pagination(self, settings):
        pages = {
            None: ([{"id": "rec1", "fields": {"title": "A"}}], "itrNEXT"),
            "itrNEXT": ([{"id": "rec2", "fields": {"title": "B"}}], None),
        }

        def handler(request: httpx.Request) -> httpx.Response:
            records, offset = pages[request.url.params.get("offset")]
            return airtable_page(records, offset)(request)

        products, sent = _search(settings, handler, ProductSearchRequest())

        assert [p.id for p in products] == ["rec1", "rec2"]
        assert len(sent) == 2
        assert sent[1].url.params["offset"] == "itrNEXT"
        assert sent[1].url.params["filterByFormula"] == sent[0].url.params["filterByFormula"]

    def test_http_error_raises_airtable_error(self, settings):
        with pytest.raises(AirtableError):
            _search(settings, status(422, '{"error": "INVALID_FILTER_BY_FORMULA"}'), ProductSearchRequest())

    def test_connection_error_raises_airtable_error(self, settings):
        with pytest.raises(AirtableError):
            _search(settings, connect_error, ProductSearchRequest())

    def test_identical_requests_give_identical_results(self, settings, sample_record):
        request = ProductSearchRequest(category="potting-soil", tags=["organic", "drainage"])
        first, _ = _search(settings, airtable_page([sample_record]), request)
        second, _ = _search(settings, airtable_page([sample_record]), request)

        assert first == second
