"""
Azure Retail Prices API client.
Uses public REST API (no authentication required).
"""
from typing import Dict, Any, List, Optional
import logging
import httpx

from price_calculator.core.config import config


logger = logging.getLogger(__name__)


class AzurePricingError(Exception):
    """Raised when Azure pricing lookup fails."""
    pass


def _odata_literal(value: str) -> str:
    """Quote a value as an OData string literal (single quotes doubled)."""
    return "'" + value.replace("'", "''") + "'"


def build_filter_expression(
    service_name: Optional[str] = None,
    sku_name: Optional[str] = None,
    region: Optional[str] = None
) -> str:
    """
    Build an OData `$filter` expression for the Retail Prices API.

    Only non-empty fields become predicates; all predicates are joined with `and`.
    When every field is empty the result is an empty string (unfiltered query).

    Args:
        service_name: Catalog service name (e.g., 'Virtual Machines')
        sku_name: ARM SKU name (e.g., 'Standard_D2s_v3')
        region: ARM region name (e.g., 'eastus')

    Returns:
        Filter expression string
    """
    predicates = []
    if service_name:
        predicates.append(f"serviceName eq {_odata_literal(service_name)}")
    if sku_name:
        predicates.append(f"armSkuName eq {_odata_literal(sku_name)}")
    if region:
        predicates.append(f"armRegionName eq {_odata_literal(region)}")
    return " and ".join(predicates)


class AzurePricingClient:
    """Client for querying Azure Retail Prices API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize Azure pricing client.

        Args:
            base_url: Retail Prices API endpoint (defaults to config)
            timeout: Request timeout in seconds (defaults to config)
            transport: Optional httpx transport, used by tests
        """
        self.base_url = base_url or config.AZURE_PRICING_API_URL
        self.timeout = timeout if timeout is not None else config.AZURE_PRICING_TIMEOUT_SECONDS
        self._transport = transport

    async def query_prices(self, filter_expression: str) -> List[Dict[str, Any]]:
        """
        Fetch the first page of catalog entries matching a filter.

        Pagination (`NextPageLink`) is not followed.

        Args:
            filter_expression: OData filter; empty string queries without a filter

        Returns:
            List of raw price items in catalog order (may be empty)

        Raises:
            AzurePricingError: On transport failure, non-success status or malformed body
        """
        params = {"$filter": filter_expression} if filter_expression else {}

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(
                    self.base_url,
                    params=params,
                    timeout=self.timeout
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as error:
            logger.error(f"Azure pricing API HTTP error: {error.response.status_code}")
            raise AzurePricingError(
                f"Failed to query Azure pricing: {error.response.status_code}"
            ) from error
        except httpx.TimeoutException as error:
            logger.error(f"Azure pricing API timed out after {self.timeout}s")
            raise AzurePricingError(
                f"Azure pricing API timed out after {self.timeout} seconds"
            ) from error
        except httpx.RequestError as error:
            logger.error(f"Azure pricing API request error: {error}")
            raise AzurePricingError(
                f"Failed to connect to Azure pricing API: {str(error)}"
            ) from error
        except ValueError as error:
            logger.error(f"Error parsing Azure pricing response: {error}")
            raise AzurePricingError("Azure pricing API returned invalid JSON") from error
        except Exception as error:
            logger.error(f"Unexpected error in Azure pricing: {error}", exc_info=True)
            raise AzurePricingError(f"Unexpected error in Azure pricing: {str(error)}") from error

        if not isinstance(data, dict):
            raise AzurePricingError("Azure pricing API returned an unexpected response")

        items = data.get("Items") or []
        if not isinstance(items, list):
            raise AzurePricingError("Azure pricing API returned an unexpected response")
        return items
