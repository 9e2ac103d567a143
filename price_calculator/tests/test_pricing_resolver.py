"""
Tests for the pricing resolver.
"""

import asyncio
import httpx
import pytest
from decimal import Decimal
from unittest.mock import Mock, AsyncMock
from price_calculator.domain.pricing_models import NO_PRICING_DATA_ERROR, ResourceDescriptor
from price_calculator.pricing.azure_pricing_client import AzurePricingClient, AzurePricingError
from price_calculator.services.pricing_resolver import PricingResolver, PricingResolverError


@pytest.mark.asyncio
async def test_resolved_quote_uses_fixed_hour_multipliers(mock_pricing_client, vm_descriptor, vm_catalog_item):
    """Monthly cost is rate x 730 x quantity, yearly is rate x 8760 x quantity."""
    mock_pricing_client.query_prices.return_value = [vm_catalog_item]
    resolver = PricingResolver(pricing_client=mock_pricing_client)

    quote = await resolver.resolve_price(vm_descriptor)

    assert quote.error is None
    assert quote.hourly_cost == Decimal("0.096")
    assert quote.monthly_cost == Decimal("0.096") * 730 * 2
    assert quote.yearly_cost == Decimal("0.096") * 8760 * 2
    assert quote.monthly_cost == Decimal("140.160")
    assert quote.yearly_cost == Decimal("1681.920")


@pytest.mark.asyncio
async def test_resolved_quote_maps_catalog_fields(mock_pricing_client, vm_descriptor, vm_catalog_item):
    """Catalog fields are copied onto the quote."""
    mock_pricing_client.query_prices.return_value = [vm_catalog_item]
    resolver = PricingResolver(pricing_client=mock_pricing_client)

    quote = await resolver.resolve_price(vm_descriptor)

    assert quote.resource_label == "Virtual Machines - Standard_D2s_v3"
    assert quote.retail_price == Decimal("0.096")
    assert quote.unit_price == Decimal("0.096")
    assert quote.unit_of_measure == "1 Hour"
    assert quote.currency_code == "USD"
    assert quote.product_name == "Virtual Machines DSv3 Series"
    assert quote.meter_name == "D2s v3"
    assert quote.quantity == 2
    assert quote.region == "eastus"


@pytest.mark.asyncio
async def test_query_filters_on_descriptor_fields(mock_pricing_client, vm_descriptor):
    """Exactly one lookup is issued, filtered on service, SKU and region."""
    resolver = PricingResolver(pricing_client=mock_pricing_client)

    await resolver.resolve_price(vm_descriptor)

    mock_pricing_client.query_prices.assert_awaited_once_with(
        "serviceName eq 'Virtual Machines' "
        "and armSkuName eq 'Standard_D2s_v3' "
        "and armRegionName eq 'eastus'"
    )


@pytest.mark.asyncio
async def test_first_catalog_item_wins(mock_pricing_client, vm_descriptor, vm_catalog_item):
    """With several matches the first returned entry is used."""
    mock_pricing_client.query_prices.return_value = [
        {**vm_catalog_item, "retailPrice": 0.2, "meterName": "first"},
        {**vm_catalog_item, "retailPrice": 0.1, "meterName": "second"},
    ]
    resolver = PricingResolver(pricing_client=mock_pricing_client)

    quote = await resolver.resolve_price(vm_descriptor)

    assert quote.hourly_cost == Decimal("0.2")
    assert quote.meter_name == "first"


@pytest.mark.asyncio
async def test_no_match_returns_error_quote(mock_pricing_client, unknown_descriptor):
    """Empty catalog result yields the no-pricing-data error."""
    resolver = PricingResolver(pricing_client=mock_pricing_client)

    quote = await resolver.resolve_price(unknown_descriptor)

    assert quote.error == NO_PRICING_DATA_ERROR
    assert quote.resource_label == "Unknown Service - X"
    assert quote.hourly_cost == Decimal("0")
    assert quote.monthly_cost == Decimal("0")
    assert quote.yearly_cost == Decimal("0")


@pytest.mark.asyncio
async def test_lookup_failure_returns_error_quote(mock_pricing_client, vm_descriptor):
    """Transport failure message is carried on the quote instead of raised."""
    mock_pricing_client.query_prices.side_effect = AzurePricingError("Failed to query Azure pricing: 500")
    resolver = PricingResolver(pricing_client=mock_pricing_client)

    quote = await resolver.resolve_price(vm_descriptor)

    assert quote.error == "Failed to query Azure pricing: 500"
    assert quote.resource_label == "Virtual Machines - Standard_D2s_v3"
    assert quote.monthly_cost == Decimal("0")


@pytest.mark.asyncio
async def test_malformed_catalog_item_returns_error_quote(mock_pricing_client, vm_descriptor, vm_catalog_item):
    """An unparseable price is reported per item."""
    mock_pricing_client.query_prices.return_value = [{**vm_catalog_item, "retailPrice": "n/a"}]
    resolver = PricingResolver(pricing_client=mock_pricing_client)

    quote = await resolver.resolve_price(vm_descriptor)

    assert quote.is_error
    assert "Invalid monetary value" in quote.error


@pytest.mark.asyncio
async def test_empty_descriptor_issues_unfiltered_query(mock_pricing_client):
    """A descriptor with no fields queries without a filter."""
    resolver = PricingResolver(pricing_client=mock_pricing_client)

    quote = await resolver.resolve_price(ResourceDescriptor(region=""))

    mock_pricing_client.query_prices.assert_awaited_once_with("")
    assert quote.resource_label == " - "


@pytest.mark.asyncio
async def test_batch_failure_is_isolated(mock_pricing_client, vm_descriptor, unknown_descriptor, vm_catalog_item):
    """One failing lookup does not affect its siblings."""
    storage = ResourceDescriptor(service_name="Storage", sku_name="Standard_LRS")

    async def lookup(filter_expression):
        if "Unknown Service" in filter_expression:
            raise AzurePricingError("Failed to connect to Azure pricing API: boom")
        if "Storage" in filter_expression:
            return [{**vm_catalog_item, "retailPrice": 0.02}]
        return [vm_catalog_item]

    mock_pricing_client.query_prices.side_effect = lookup
    resolver = PricingResolver(pricing_client=mock_pricing_client)

    quotes = await resolver.resolve_prices([vm_descriptor, unknown_descriptor, storage])

    assert len(quotes) == 3
    assert quotes[0].hourly_cost == Decimal("0.096")
    assert quotes[1].error == "Failed to connect to Azure pricing API: boom"
    assert quotes[2].hourly_cost == Decimal("0.02")


@pytest.mark.asyncio
async def test_batch_preserves_input_order_when_completion_order_differs(vm_catalog_item):
    """Results follow input order even when later lookups finish first."""
    delays = {"A": 0.03, "B": 0.01, "C": 0.0}

    async def lookup(filter_expression):
        sku = filter_expression.split("armSkuName eq '")[1].split("'")[0]
        await asyncio.sleep(delays[sku])
        return [{**vm_catalog_item, "meterName": sku}]

    client = Mock()
    client.query_prices = AsyncMock(side_effect=lookup)
    resolver = PricingResolver(pricing_client=client, max_concurrency=3)
    descriptors = [ResourceDescriptor(service_name="Svc", sku_name=sku) for sku in "ABC"]

    quotes = await resolver.resolve_prices(descriptors)

    assert [quote.meter_name for quote in quotes] == ["A", "B", "C"]
    assert [quote.resource_label for quote in quotes] == ["Svc - A", "Svc - B", "Svc - C"]


@pytest.mark.asyncio
async def test_empty_batch_returns_empty_list(mock_pricing_client):
    """Empty batch is valid and issues no lookups."""
    resolver = PricingResolver(pricing_client=mock_pricing_client)

    assert await resolver.resolve_prices([]) == []
    mock_pricing_client.query_prices.assert_not_awaited()


@pytest.mark.asyncio
async def test_missing_batch_raises(mock_pricing_client):
    """A missing collection is a caller error."""
    resolver = PricingResolver(pricing_client=mock_pricing_client)

    with pytest.raises(PricingResolverError):
        await resolver.resolve_prices(None)


@pytest.mark.asyncio
async def test_non_descriptor_entry_raises(mock_pricing_client):
    """Entries that are not descriptors make the batch malformed."""
    resolver = PricingResolver(pricing_client=mock_pricing_client)

    with pytest.raises(PricingResolverError, match=r"resources\[0\]"):
        await resolver.resolve_prices([{"serviceName": "Storage"}])


@pytest.mark.asyncio
async def test_pricing_analysis_envelope(mock_pricing_client, vm_descriptor, unknown_descriptor, vm_catalog_item):
    """Envelope reports count and carries quotes in order."""
    mock_pricing_client.query_prices.side_effect = [[vm_catalog_item], []]
    resolver = PricingResolver(pricing_client=mock_pricing_client, max_concurrency=1)

    result = await resolver.get_resource_pricing([vm_descriptor, unknown_descriptor])
    payload = result.to_dict()

    assert payload["status"] == "success"
    assert payload["resourceCount"] == 2
    assert payload["pricingData"][0]["monthlyCost"] == 140.16
    assert payload["pricingData"][1]["error"] == NO_PRICING_DATA_ERROR
    assert payload["instructions"].startswith("Use calculate_total_cost")


def test_descriptor_rejects_non_positive_quantity():
    """Quantity must be at least one."""
    with pytest.raises(ValueError):
        ResourceDescriptor(service_name="Storage", sku_name="Standard_LRS", quantity=0)


@pytest.mark.asyncio
async def test_batch_isolates_unexpected_transport_fault(vm_descriptor, vm_catalog_item):
    """A non-httpx fault during one lookup only fails that resource."""
    def handler(request: httpx.Request) -> httpx.Response:
        if "Bad" in request.url.params.get("$filter", ""):
            raise RuntimeError("transport blew up")
        return httpx.Response(200, json={"Items": [vm_catalog_item]})

    client = AzurePricingClient(
        base_url="https://prices.example.test/api/retail/prices",
        transport=httpx.MockTransport(handler)
    )
    resolver = PricingResolver(pricing_client=client)
    bad = ResourceDescriptor(service_name="Bad", sku_name="Y")

    quotes = await resolver.resolve_prices([vm_descriptor, bad])

    assert len(quotes) == 2
    assert quotes[0].error is None
    assert quotes[0].monthly_cost == Decimal("140.160")
    assert quotes[1].resource_label == "Bad - Y"
    assert "transport blew up" in quotes[1].error
    assert quotes[1].monthly_cost == Decimal("0")


@pytest.mark.asyncio
async def test_batch_isolates_fault_raised_by_lookup_client(vm_descriptor, unknown_descriptor, vm_catalog_item):
    """An exception escaping the lookup client becomes an error quote."""
    async def lookup(filter_expression):
        if "Unknown Service" in filter_expression:
            raise ArithmeticError("decimal overflow")
        return [vm_catalog_item]

    client = Mock()
    client.query_prices = AsyncMock(side_effect=lookup)
    resolver = PricingResolver(pricing_client=client)

    quotes = await resolver.resolve_prices([unknown_descriptor, vm_descriptor])

    assert quotes[0].error == "decimal overflow"
    assert quotes[1].hourly_cost == Decimal("0.096")
