"""Pydantic schemas for the storefront widget's API.

The widget speaks camelCase JSON for the conversation endpoint and the
catalog's own snake_case keys for products; aliases keep both on the wire
while the Python side stays snake_case.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Catalog
# ============================================================================

class ProductSearchRequest(BaseModel):
    """Structured catalog search sent by the widget."""
    query: str | None = None  # Accepted but not used for filtering
    category: str | None = None
    tags: list[str] | None = None


class Product(BaseModel):
    """Flat product record projected from an Airtable catalog row.

    Field values pass through as Airtable returns them; lookup, linked-record
    and multi-select fields arrive as lists.
    """
    id: str
    product_id: Any = None
    title: Any = None
    brand: Any = None
    category: Any = None
    tags: Any = None  # Comma-separated text or a multi-select list
    short_description: Any = None
    price: Any = None
    bag_size_cf: Any = None
    in_stock: Any = None
    image_url: Any = None
    use_case: Any = None
    voice_script_30S: Any = None


class ProductSearchResponse(BaseModel):
    """Catalog search result."""
    products: list[Product] = Field(default_factory=list)


# ============================================================================
# Conversation
# ============================================================================

class ConversationTurn(BaseModel):
    """One prior message of the conversation, forwarded to the model as-is."""
    role: Any = None
    content: Any = None

    model_config = ConfigDict(extra="allow")


class GetResponseRequest(BaseModel):
    """A customer turn plus the context needed to answer it."""
    user_message: str | None = Field(default=None, alias="userMessage")
    conversation_history: list[ConversationTurn] = Field(
        default_factory=list, alias="conversationHistory"
    )
    # Free-form product objects; echoed back verbatim when recommended
    available_products: list[dict[str, Any]] = Field(
        default_factory=list, alias="availableProducts"
    )

    model_config = ConfigDict(populate_by_name=True)


class AIResponse(BaseModel):
    """The assistant's reply and the products it mentioned."""
    text: str
    recommended_products: list[dict[str, Any]] = Field(
        default_factory=list, alias="recommendedProducts"
    )

    model_config = ConfigDict(populate_by_name=True)


# ============================================================================
# Speech
# ============================================================================

class TranscriptResponse(BaseModel):
    """Speech-to-text result."""
    transcript: str


class SpeakRequest(BaseModel):
    """Text-to-speech request."""
    text: str = ""


# ============================================================================
# Common
# ============================================================================

class ErrorResponse(BaseModel):
    """Fixed, client-facing failure body."""
    error: str


class HealthResponse(BaseModel):
    """Liveness response."""
    status: str
