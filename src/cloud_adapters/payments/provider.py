"""
Stripe Provider.

Creates shareable payment links through the Stripe API. Backend failures
(unknown price ids, invalid quantities, auth errors) surface as the stripe
package's own ``StripeError`` subclasses.
"""

import logging
from typing import Any, Mapping, Optional, Union

import stripe

from ..settings import StripeSettings
from .models import PaymentLinkOptions

logger = logging.getLogger(__name__)


class StripeProvider:
    """
    Stripe integration provider.

    Args:
        api_key: Stripe secret key (or pass ``settings``)
        settings: StripeSettings
        client: Pre-built stripe.StripeClient (skips client creation)

    Raises:
        pydantic.ValidationError: If the API key is missing or blank
    """

    version = "1.0.0"
    icon = (
        "https://cdn.brandfetch.io/idxAg10C0L/w/480/h/480/theme/dark/icon.jpeg"
        "?c=1bxid64Mup7aczewSAYMX&t=1761194563315"
    )

    def __init__(
        self,
        api_key: Optional[str] = None,
        settings: Optional[StripeSettings] = None,
        client: Any = None,
    ):
        if settings is None:
            settings = StripeSettings(api_key=api_key or "")
        self.settings = settings
        self.api_key = settings.api_key
        self.client = client if client is not None else stripe.StripeClient(self.api_key)

    async def generate_payment_link(
        self,
        options: Union[PaymentLinkOptions, Mapping[str, Any], None] = None,
        **kwargs: Any,
    ) -> str:
        """
        Create a payment link and return its URL.

        Args:
            options: PaymentLinkOptions or an equivalent mapping. Keyword
                     arguments are accepted instead of a mapping.

        Returns:
            The payment link URL

        Raises:
            TypeError: If both options and keyword arguments are given
            pydantic.ValidationError: If the options are malformed
            stripe.StripeError: If Stripe rejects the request

        Example:
            >>> url = await provider.generate_payment_link(
            ...     line_items=[{"price": "price_123", "quantity": 2}],
            ...     allow_promotion_codes=True,
            ... )
        """
        if options is None:
            options = PaymentLinkOptions(**kwargs)
        elif kwargs:
            raise TypeError(
                "generate_payment_link() takes options or keyword arguments, not both"
            )
        elif not isinstance(options, PaymentLinkOptions):
            options = PaymentLinkOptions(**options)

        payment_link = await self.client.v1.payment_links.create_async(
            params=options.to_params()
        )
        logger.debug(f"Created payment link: {payment_link.id}")
        return payment_link.url
