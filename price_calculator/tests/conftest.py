"""
Shared pytest fixtures for price calculator tests.
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

import pytest
from decimal import Decimal
from unittest.mock import Mock, AsyncMock
from fastapi.testclient import TestClient

from price_calculator.domain.pricing_models import PriceQuote, ResourceDescriptor


@pytest.fixture
def client():
    """FastAPI test client."""
    from price_calculator.main import app
    return TestClient(app)


@pytest.fixture
def vm_catalog_item():
    """Raw Retail Prices API item for a D2s v3 VM."""
    return {
        "currencyCode": "USD",
        "retailPrice": 0.096,
        "unitPrice": 0.096,
        "unitOfMeasure": "1 Hour",
        "serviceName": "Virtual Machines",
        "productName": "Virtual Machines DSv3 Series",
        "skuName": "D2s v3",
        "meterName": "D2s v3",
        "armRegionName": "eastus",
        "armSkuName": "Standard_D2s_v3",
    }


@pytest.fixture
def vm_descriptor():
    """Two D2s v3 virtual machines in East US."""
    return ResourceDescriptor(
        service_name="Virtual Machines",
        sku_name="Standard_D2s_v3",
        region="eastus",
        quantity=2,
    )


@pytest.fixture
def unknown_descriptor():
    """Descriptor the catalog has no entry for."""
    return ResourceDescriptor(service_name="Unknown Service", sku_name="X", region="eastus", quantity=1)


@pytest.fixture
def mock_pricing_client():
    """Mock catalog client returning no items by default."""
    mock = Mock()
    mock.query_prices = AsyncMock(return_value=[])
    return mock


def make_quote(
    label: str = "Virtual Machines - Standard_D2s_v3",
    hourly_cost: str = "0.096",
    quantity: int = 1,
    currency_code: str = "USD",
    error: str = None,
) -> PriceQuote:
    """Build a price quote for aggregator tests."""
    service_name, _, sku_name = label.partition(" - ")
    if error:
        return PriceQuote(
            resource_label=label,
            service_name=service_name,
            sku_name=sku_name,
            region="eastus",
            quantity=quantity,
            error=error,
        )
    hourly = Decimal(hourly_cost)
    return PriceQuote(
        resource_label=label,
        service_name=service_name,
        sku_name=sku_name,
        region="eastus",
        quantity=quantity,
        unit_of_measure="1 Hour",
        retail_price=hourly,
        unit_price=hourly,
        currency_code=currency_code,
        hourly_cost=hourly,
        monthly_cost=hourly * 730 * quantity,
        yearly_cost=hourly * 8760 * quantity,
    )


@pytest.fixture
def quote_factory():
    """Factory fixture for price quotes."""
    return make_quote
