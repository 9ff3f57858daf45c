"""
Payment link request models.

Only the shape is validated locally. Stripe validates price ids, quantity
limits and the rest.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class AfterCompletionType(str, Enum):
    """What the customer sees after paying."""

    REDIRECT = "redirect"
    HOSTED_CONFIRMATION = "hosted_confirmation"


class LineItem(BaseModel):
    """One (price, quantity) pair of a payment link."""

    price: str = Field(description="Stripe price ID, e.g. price_123")

    quantity: int = Field(ge=1, description="Quantity of the price")

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        if not v.strip():
            raise ValueError("price must be a non-empty string")
        return v


class Redirect(BaseModel):
    url: str = Field(description="URL the customer is redirected to")


class HostedConfirmation(BaseModel):
    custom_message: Optional[str] = Field(
        default=None,
        description="Message shown on Stripe's confirmation page",
    )


class AfterCompletion(BaseModel):
    """Post-payment behavior of a payment link."""

    type: AfterCompletionType = Field(description="redirect | hosted_confirmation")

    redirect: Optional[Redirect] = None

    hosted_confirmation: Optional[HostedConfirmation] = None

    @model_validator(mode="after")
    def validate_redirect(self):
        if self.type == AfterCompletionType.REDIRECT and self.redirect is None:
            raise ValueError("after_completion of type 'redirect' requires redirect.url")
        return self

    model_config = {"use_enum_values": True}


class PaymentLinkOptions(BaseModel):
    """
    Options for creating a payment link.

    Example:
        >>> options = PaymentLinkOptions(
        ...     line_items=[{"price": "price_123", "quantity": 2}],
        ...     after_completion={
        ...         "type": "redirect",
        ...         "redirect": {"url": "https://example.com/thanks"},
        ...     },
        ... )
        >>> options.to_params()["line_items"]
        [{'price': 'price_123', 'quantity': 2}]
    """

    line_items: List[LineItem] = Field(
        min_length=1,
        description="Ordered (price, quantity) pairs",
    )

    allow_promotion_codes: Optional[bool] = Field(
        default=None,
        description="Whether customers can enter promotion codes",
    )

    after_completion: Optional[AfterCompletion] = Field(
        default=None,
        description="Behavior after a completed payment",
    )

    def to_params(self) -> Dict[str, Any]:
        """Build Stripe PaymentLink.create params, omitting unset options."""
        return self.model_dump(exclude_none=True)
