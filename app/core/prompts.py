"""System prompt for the garden-center voice assistant.

The assistant plays a soil-products specialist on the shop floor. Most callers
speak to it through the voice widget, so replies must stay short enough to be
read aloud, and should only recommend products from the list it is given.
"""

import json
from typing import Any


SALES_ASSOCIATE_PROMPT = """You are a helpful garden center employee specializing in soil products.
Your job is to help customers find the right soil products for their needs.

Available products:
{products}

Guidelines:
- Be friendly, warm, and patient (many customers are 55-70 years old)
- Ask clarifying questions if needed (indoor/outdoor, vegetables/flowers, containers/beds)
- Recommend specific products from the available list
- Mention key benefits (drainage, nutrients, organic, etc.)
- Keep responses concise (2-4 sentences)
- If you don't know something, offer to get a staff member

Current customer question: {question}"""


def serialize_products(products: list[Any]) -> str:
    """Render the product list the way it is embedded in the prompt.

    Products are passed through untouched, so any extra keys the widget sends
    are visible to the model too.
    """
    return json.dumps(products, indent=2, ensure_ascii=False)


def build_system_prompt(products: list[Any], user_message: str | None) -> str:
    """Build the grounding system instruction for one conversation turn.

    Args:
        products: Caller-supplied products, serialized verbatim.
        user_message: The current customer question.

    Returns:
        The full system prompt text.
    """
    return SALES_ASSOCIATE_PROMPT.format(
        products=serialize_products(products),
        question=user_message if user_message is not None else "",
    )
