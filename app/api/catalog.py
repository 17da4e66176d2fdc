"""Catalog search endpoint."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.api.deps import RATE_LIMIT, AirtableDep, limiter
from app.schemas.storefront import (
    ErrorResponse,
    ProductSearchRequest,
    ProductSearchResponse,
)
from app.services.catalog import search_products

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["Catalog"])

SEARCH_FAILED = "Product search failed"


@router.post(
    "/search-products",
    response_model=ProductSearchResponse,
    responses={500: {"model": ErrorResponse}},
)
@limiter.limit(RATE_LIMIT)
async def search_products_endpoint(
    request: Request,
    payload: ProductSearchRequest,
    airtable: AirtableDep,
):
    """Search in-stock products by category and tags.

    Returns at most 10 products ordered by title.
    """
    try:
        products = await search_products(airtable, payload)
        return ProductSearchResponse(products=products)

    except Exception as e:
        logger.exception(f"Airtable error: {e}")
        return JSONResponse(status_code=500, content={"error": SEARCH_FAILED})
