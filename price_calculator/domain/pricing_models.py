"""
Domain models for price resolution.
Defines resource descriptors, catalog entries and priced quotes.
"""
from typing import List, Dict, Any, Optional
from dataclasses import dataclass
from decimal import Decimal

from price_calculator.domain.cost_models import ZERO, to_decimal


NO_PRICING_DATA_ERROR = "No pricing data found for this resource"


@dataclass(frozen=True)
class ResourceDescriptor:
    """Caller-supplied description of one resource to price."""
    service_name: str = ""
    sku_name: str = ""
    region: str = "eastus"
    quantity: int = 1
    notes: Optional[str] = None
    
    def __post_init__(self):
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity < 1:
            raise ValueError(f"quantity must be a positive integer (got: {self.quantity!r})")
    
    @property
    def label(self) -> str:
        """Human-readable identity, stable on success and failure."""
        return f"{self.service_name} - {self.sku_name}"
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            "serviceName": self.service_name,
            "skuName": self.sku_name,
            "region": self.region,
            "quantity": self.quantity,
        }
        if self.notes is not None:
            result["notes"] = self.notes
        return result


@dataclass(frozen=True)
class CatalogPriceItem:
    """One entry of the Azure Retail Prices API response."""
    currency_code: str
    retail_price: Decimal
    unit_price: Decimal
    unit_of_measure: str
    service_name: str = ""
    product_name: str = ""
    sku_name: str = ""
    meter_name: str = ""
    arm_region_name: str = ""
    arm_sku_name: str = ""
    
    @classmethod
    def from_api_item(cls, item: Dict[str, Any]) -> "CatalogPriceItem":
        """
        Parse a raw API item.
        
        Raises:
            ValueError: If the item is not an object or carries invalid prices
        """
        if not isinstance(item, dict):
            raise ValueError(f"Unexpected pricing item: {item!r}")
        return cls(
            currency_code=item.get("currencyCode") or "USD",
            retail_price=to_decimal(item.get("retailPrice")),
            unit_price=to_decimal(item.get("unitPrice")),
            unit_of_measure=item.get("unitOfMeasure") or "",
            service_name=item.get("serviceName") or "",
            product_name=item.get("productName") or "",
            sku_name=item.get("skuName") or "",
            meter_name=item.get("meterName") or "",
            arm_region_name=item.get("armRegionName") or "",
            arm_sku_name=item.get("armSkuName") or "",
        )


@dataclass(frozen=True)
class PriceQuote:
    """
    Priced result for one resource descriptor.
    
    Either the pricing fields are populated or `error` is set; an error quote
    carries zero monetary values.
    """
    resource_label: str
    service_name: str
    sku_name: str
    region: str
    quantity: int
    unit_of_measure: str = ""
    retail_price: Decimal = ZERO
    unit_price: Decimal = ZERO
    currency_code: Optional[str] = None
    hourly_cost: Decimal = ZERO
    monthly_cost: Decimal = ZERO
    yearly_cost: Decimal = ZERO
    product_name: Optional[str] = None
    meter_name: Optional[str] = None
    error: Optional[str] = None
    
    @property
    def is_error(self) -> bool:
        return bool(self.error)
    
    @classmethod
    def failed(cls, descriptor: ResourceDescriptor, error: str) -> "PriceQuote":
        """Build an error-tagged quote for a descriptor that could not be priced."""
        return cls(
            resource_label=descriptor.label,
            service_name=descriptor.service_name,
            sku_name=descriptor.sku_name,
            region=descriptor.region,
            quantity=descriptor.quantity,
            error=error,
        )
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            "resourceLabel": self.resource_label,
            "serviceName": self.service_name,
            "skuName": self.sku_name,
            "region": self.region,
            "quantity": self.quantity,
            "unitOfMeasure": self.unit_of_measure,
            "retailPrice": float(self.retail_price),
            "unitPrice": float(self.unit_price),
            "currencyCode": self.currency_code,
            "hourlyCost": float(self.hourly_cost),
            "monthlyCost": float(self.monthly_cost),
            "yearlyCost": float(self.yearly_cost),
            "productName": self.product_name,
            "meterName": self.meter_name,
        }
        if self.error is not None:
            result["error"] = self.error
        return result


@dataclass
class PricingAnalysisResult:
    """Envelope returned by batch price resolution."""
    pricing_data: List[PriceQuote]
    status: str = "success"
    instructions: str = "Use calculate_total_cost to get the total monthly and yearly costs"
    
    @property
    def resource_count(self) -> int:
        return len(self.pricing_data)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "status": self.status,
            "resourceCount": self.resource_count,
            "pricingData": [quote.to_dict() for quote in self.pricing_data],
            "instructions": self.instructions,
        }
