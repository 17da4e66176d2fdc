"""Catalog search over the Airtable product table.

This module handles:
- Translating a widget search request into an Airtable filter formula
- Running the query (in-stock only, 10 results, sorted by title)
- Projecting raw Airtable records onto the flat Product shape
"""

import logging
from typing import Any

from app.config import Settings, get_settings
from app.schemas.storefront import Product, ProductSearchRequest
from app.services.airtable import AirtableClient
from app.utils.formula import field_ref, quote_formula_string

logger = logging.getLogger(__name__)

# Constants
MAX_SEARCH_RESULTS = 10
SORT_FIELD = "title"
IN_STOCK_CLAUSE = f"{field_ref('in_stock')} = TRUE()"

# Product attribute -> Airtable field name, where they differ
FIELD_ALIASES = {
    "bag_size_cf": "bag-size-cf",
    "use_case": "use-case",
}


def build_filter_formula(
    category: str | None = None,
    tags: list[str] | None = None,
) -> str:
    """Build the filterByFormula expression for a catalog search.

    The in-stock clause is always present. A category adds an equality
    clause; tags add one OR group of FIND() substring checks against the
    tags field. All clauses are joined with AND().

    Examples:
        >>> build_filter_formula()
        'AND({in_stock} = TRUE())'
        >>> build_filter_formula("potting-soil", ["organic", "drainage"])
        "AND({in_stock} = TRUE(), {category} = 'potting-soil', OR(FIND('organic', {tags}), FIND('drainage', {tags})))"
    """
    clauses = [IN_STOCK_CLAUSE]

    if category:
        clauses.append(f"{field_ref('category')} = {quote_formula_string(category)}")

    if tags:
        tag_conditions = ", ".join(
            f"FIND({quote_formula_string(tag)}, {field_ref('tags')})" for tag in tags
        )
        clauses.append(f"OR({tag_conditions})")

    return f"AND({', '.join(clauses)})"


def record_to_product(record: dict[str, Any]) -> Product:
    """Project one Airtable record onto the Product shape.

    Fields missing from the record come back as None.
    """
    fields = record.get("fields") or {}
    values = {
        name: fields.get(FIELD_ALIASES.get(name, name))
        for name in Product.model_fields
        if name != "id"
    }
    return Product(id=record["id"], **values)


async def search_products(
    client: AirtableClient,
    request: ProductSearchRequest,
    settings: Settings | None = None,
) -> list[Product]:
    """Run a catalog search and return normalized products.

    Args:
        client: Airtable client to query through
        request: Search request from the widget
        settings: Settings override (defaults to the global settings)

    Returns:
        Up to 10 in-stock products, ordered by title ascending
    """
    settings = settings or get_settings()

    if request.query:
        # The free-text query is carried for future use; filtering ignores it.
        logger.debug(f"Catalog search query text ignored: {request.query!r}")

    formula = build_filter_formula(request.category, request.tags)

    records = await client.list_records(
        settings.airtable_table_name,
        filter_by_formula=formula,
        max_records=MAX_SEARCH_RESULTS,
        sort=[(SORT_FIELD, "asc")],
    )

    products = [record_to_product(record) for record in records]
    logger.info(
        f"Catalog search: category={request.category}, tags={request.tags}, results={len(products)}"
    )
    return products
