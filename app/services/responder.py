"""Conversation responder for the voice assistant.

Builds the message list for one customer turn, asks the LLM for a reply, and
works out which of the offered products the reply mentions.
"""

import logging
from typing import Any

from app.core.llm import OpenAIClient
from app.core.prompts import build_system_prompt
from app.schemas.storefront import AIResponse, GetResponseRequest

logger = logging.getLogger(__name__)

MAX_RECOMMENDED_PRODUCTS = 3


def build_messages(request: GetResponseRequest) -> list[dict[str, Any]]:
    """Assemble [system] + history + [current user message].

    History is forwarded in the order given and is not trimmed.
    """
    messages: list[dict[str, Any]] = [
        {
            "role": "system",
            "content": build_system_prompt(request.available_products, request.user_message),
        }
    ]
    messages.extend(
        turn.model_dump(exclude_unset=True) for turn in request.conversation_history
    )
    messages.append({"role": "user", "content": request.user_message})
    return messages


def extract_recommended_products(
    reply: str,
    products: list[dict[str, Any]],
    limit: int = MAX_RECOMMENDED_PRODUCTS,
) -> list[dict[str, Any]]:
    """Return the products whose title appears in the reply.

    Matching is a case-insensitive substring check on the title. Input order
    is kept and at most `limit` products are returned. Products without a
    string title never match.
    """
    reply_lower = reply.lower()
    matches = []
    for product in products:
        title = product.get("title")
        if isinstance(title, str) and title.lower() in reply_lower:
            matches.append(product)
    return matches[:limit]


async def generate_response(
    llm_client: OpenAIClient,
    request: GetResponseRequest,
) -> AIResponse:
    """Produce the assistant's reply for one customer turn.

    Args:
        llm_client: Chat-completions client
        request: The customer's message, history and product list

    Returns:
        AIResponse with the reply text and up to three mentioned products
    """
    messages = build_messages(request)

    logger.info(
        f"Generating reply: history={len(request.conversation_history)}, "
        f"products={len(request.available_products)}"
    )

    text = await llm_client.chat_completion(messages)
    recommended = extract_recommended_products(text, request.available_products)

    return AIResponse(text=text, recommended_products=recommended)
