"""Conversation endpoint.

The widget sends the customer's latest message with the conversation so far
and the products currently on screen; we return the assistant's reply plus the
products it mentioned, so the widget can show them as cards.
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.api.deps import RATE_LIMIT, LLMDep, limiter
from app.schemas.storefront import AIResponse, ErrorResponse, GetResponseRequest
from app.services.responder import generate_response

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["Conversation"])

AI_RESPONSE_FAILED = "AI response failed"


@router.post(
    "/get-response",
    response_model=AIResponse,
    responses={500: {"model": ErrorResponse}},
)
@limiter.limit(RATE_LIMIT)
async def get_response(
    request: Request,
    payload: GetResponseRequest,
    llm: LLMDep,
):
    """Answer one customer turn, grounded in the supplied products."""
    try:
        return await generate_response(llm, payload)

    except Exception as e:
        logger.exception(f"OpenAI error: {e}")
        return JSONResponse(status_code=500, content={"error": AI_RESPONSE_FAILED})
