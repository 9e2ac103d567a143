"""
Pricing resolver service.
Maps resource descriptors to priced quotes using the Azure Retail Prices API.
"""
from typing import List, Optional, Sequence
import asyncio
import logging

from price_calculator.core.config import config
from price_calculator.domain.pricing_models import (
    CatalogPriceItem,
    NO_PRICING_DATA_ERROR,
    PriceQuote,
    PricingAnalysisResult,
    ResourceDescriptor,
)
from price_calculator.pricing.azure_pricing_client import (
    AzurePricingClient,
    AzurePricingError,
    build_filter_expression,
)


logger = logging.getLogger(__name__)


class PricingResolverError(Exception):
    """Raised when the resolver receives a malformed batch."""
    pass


class PricingResolver:
    """Service for resolving resource descriptors to catalog prices."""

    def __init__(
        self,
        pricing_client: Optional[AzurePricingClient] = None,
        max_concurrency: Optional[int] = None
    ):
        """
        Initialize pricing resolver.

        Args:
            pricing_client: Catalog lookup client (creates new if None)
            max_concurrency: Max lookups in flight per batch (defaults to config)
        """
        self.pricing_client = pricing_client or AzurePricingClient()
        self.max_concurrency = max_concurrency or config.PRICING_MAX_CONCURRENCY

    async def resolve_price(self, descriptor: ResourceDescriptor) -> PriceQuote:
        """
        Resolve one descriptor to exactly one quote.

        Lookup failures and empty results become error-tagged quotes;
        nothing is raised for per-resource conditions.

        Args:
            descriptor: Resource to price

        Returns:
            PriceQuote (priced, or tagged with `error`)
        """
        filter_expression = build_filter_expression(
            service_name=descriptor.service_name,
            sku_name=descriptor.sku_name,
            region=descriptor.region,
        )

        try:
            items = await self.pricing_client.query_prices(filter_expression)
            if not items:
                logger.info(
                    f"No pricing data for {descriptor.label} in {descriptor.region or 'any region'}"
                )
                return PriceQuote.failed(descriptor, NO_PRICING_DATA_ERROR)

            # First catalog entry wins
            catalog_item = CatalogPriceItem.from_api_item(items[0])
            return self._build_quote(descriptor, catalog_item)
        except (AzurePricingError, ValueError) as error:
            logger.error(
                f"Error fetching pricing for {descriptor.service_name} - {descriptor.sku_name}: {error}"
            )
            return PriceQuote.failed(descriptor, str(error))
        except Exception as error:
            # Any other fault stays with this resource
            logger.error(
                f"Unexpected error pricing {descriptor.service_name} - {descriptor.sku_name}: {error}",
                exc_info=True
            )
            return PriceQuote.failed(descriptor, str(error) or error.__class__.__name__)

    def _build_quote(self, descriptor: ResourceDescriptor, item: CatalogPriceItem) -> PriceQuote:
        """
        Project catalog retail price to hourly, monthly and yearly cost.

        The retail price is taken as the hourly rate for one unit.
        """
        hourly_cost = item.retail_price
        return PriceQuote(
            resource_label=descriptor.label,
            service_name=descriptor.service_name,
            sku_name=descriptor.sku_name,
            region=descriptor.region,
            quantity=descriptor.quantity,
            unit_of_measure=item.unit_of_measure,
            retail_price=item.retail_price,
            unit_price=item.unit_price,
            currency_code=item.currency_code,
            hourly_cost=hourly_cost,
            monthly_cost=hourly_cost * config.HOURS_PER_MONTH * descriptor.quantity,
            yearly_cost=hourly_cost * config.HOURS_PER_YEAR * descriptor.quantity,
            product_name=item.product_name or None,
            meter_name=item.meter_name or None,
        )

    async def resolve_prices(self, descriptors: Sequence[ResourceDescriptor]) -> List[PriceQuote]:
        """
        Resolve a batch of descriptors concurrently.

        Args:
            descriptors: Resources to price

        Returns:
            One quote per descriptor, in input order

        Raises:
            PricingResolverError: If the batch itself is missing or malformed
        """
        if descriptors is None:
            raise PricingResolverError("resources list is required")
        if isinstance(descriptors, (str, bytes, dict)):
            raise PricingResolverError("resources must be a list")
        for index, descriptor in enumerate(descriptors):
            if not isinstance(descriptor, ResourceDescriptor):
                raise PricingResolverError(
                    f"resources[{index}] is not a resource descriptor"
                )

        logger.info(f"Fetching pricing for {len(descriptors)} resources")

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _bounded(descriptor: ResourceDescriptor) -> PriceQuote:
            async with semaphore:
                return await self.resolve_price(descriptor)

        # gather preserves input order regardless of completion order
        return list(await asyncio.gather(*(_bounded(d) for d in descriptors)))

    async def get_resource_pricing(
        self,
        descriptors: Sequence[ResourceDescriptor]
    ) -> PricingAnalysisResult:
        """
        Resolve a batch and wrap it in the pricing analysis envelope.

        Raises:
            PricingResolverError: If the batch itself is missing or malformed
        """
        quotes = await self.resolve_prices(descriptors)
        return PricingAnalysisResult(pricing_data=quotes)
