"""
API routes for the MCP tool endpoints.
Exposes diagram extraction, price resolution and cost calculation.
"""
from typing import Dict, Any, List, Optional, Union
import logging
import math

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from price_calculator.core.config import config
from price_calculator.domain.cost_models import ZERO, to_decimal
from price_calculator.domain.pricing_models import PriceQuote, ResourceDescriptor
from price_calculator.pricing.azure_pricing_client import AzurePricingClient
from price_calculator.services.cost_aggregator import CostAggregator, CostAggregatorError
from price_calculator.services.diagram_analysis import DiagramAnalysisService
from price_calculator.services.pricing_resolver import PricingResolver, PricingResolverError
from price_calculator.services.tool_catalog import list_tools


logger = logging.getLogger(__name__)
router = APIRouter(prefix="/mcp", tags=["mcp"])


class ApiModel(BaseModel):
    """Base model accepting camelCase or snake_case field names."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DiagramAnalysisRequest(ApiModel):
    """Request model for diagram resource extraction."""
    image_data: str = Field(..., min_length=1, description="Base64-encoded image data or URL")
    image_type: Optional[str] = Field("base64", description="Type of image input (base64 or url)")


class ResourceDescriptorModel(ApiModel):
    """Request model for one Azure resource to price."""
    service_name: str = Field("", description="Azure service name, e.g. 'Virtual Machines'")
    sku_name: str = Field("", description="ARM SKU name, e.g. 'Standard_D2s_v3'")
    region: str = Field(default_factory=lambda: config.DEFAULT_REGION, description="ARM region name")
    quantity: int = Field(1, ge=1, description="Number of instances")
    notes: Optional[str] = Field(None, description="Optional free-text notes")

    def to_domain(self) -> ResourceDescriptor:
        return ResourceDescriptor(
            service_name=self.service_name,
            sku_name=self.sku_name,
            region=self.region,
            quantity=self.quantity,
            notes=self.notes,
        )


class PricingRequest(ApiModel):
    """Request model wrapping the resources list."""
    resources: List[ResourceDescriptorModel] = Field(..., description="Resources to price")


class PriceQuoteModel(ApiModel):
    """Request model for one priced resource (output of get-pricing)."""
    resource_label: str = Field("", description="Display label '<service> - <sku>'")
    service_name: str = ""
    sku_name: str = ""
    region: str = ""
    quantity: int = Field(1, description="Number of instances; at least 1 unless error is set")
    unit_of_measure: str = ""
    retail_price: float = 0
    unit_price: float = 0
    currency_code: Optional[str] = None
    hourly_cost: float = Field(0, description="Hourly cost for one instance")
    monthly_cost: float = 0
    yearly_cost: float = 0
    product_name: Optional[str] = None
    meter_name: Optional[str] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def check_priced_fields(self) -> "PriceQuoteModel":
        """Quantity and prices are only validated on items without an error."""
        if self.error:
            return self
        if self.quantity < 1:
            raise ValueError("quantity must be at least 1 for priced items")
        for name in ("retail_price", "unit_price", "hourly_cost", "monthly_cost", "yearly_cost"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be a non-negative number")
        return self

    def to_domain(self) -> PriceQuote:
        if self.error:
            return PriceQuote(
                resource_label=self.resource_label or f"{self.service_name} - {self.sku_name}",
                service_name=self.service_name,
                sku_name=self.sku_name,
                region=self.region,
                quantity=self.quantity,
                retail_price=ZERO,
                unit_price=ZERO,
                hourly_cost=ZERO,
                monthly_cost=ZERO,
                yearly_cost=ZERO,
                error=self.error,
            )
        return PriceQuote(
            resource_label=self.resource_label or f"{self.service_name} - {self.sku_name}",
            service_name=self.service_name,
            sku_name=self.sku_name,
            region=self.region,
            quantity=self.quantity,
            unit_of_measure=self.unit_of_measure,
            retail_price=to_decimal(self.retail_price),
            unit_price=to_decimal(self.unit_price),
            currency_code=self.currency_code,
            hourly_cost=to_decimal(self.hourly_cost),
            monthly_cost=to_decimal(self.monthly_cost),
            yearly_cost=to_decimal(self.yearly_cost),
            product_name=self.product_name,
            meter_name=self.meter_name,
            error=self.error,
        )


class CostCalculationRequest(ApiModel):
    """Request model wrapping the pricing data list."""
    pricing_data: List[PriceQuoteModel] = Field(..., description="Priced resources")


def _unwrap_resources(
    payload: Union[List[ResourceDescriptorModel], PricingRequest]
) -> List[ResourceDescriptor]:
    """Accept either a bare resources array or {"resources": [...]}."""
    models = payload.resources if isinstance(payload, PricingRequest) else payload
    return [model.to_domain() for model in models]


def _unwrap_pricing_data(
    payload: Union[List[PriceQuoteModel], CostCalculationRequest]
) -> List[PriceQuote]:
    """Accept either a bare pricing data array or {"pricingData": [...]}."""
    models = payload.pricing_data if isinstance(payload, CostCalculationRequest) else payload
    return [model.to_domain() for model in models]


def _bad_request(error: Exception) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail={"status": "error", "message": str(error)}
    )


@router.get("/tools")
async def get_tools() -> Dict[str, Any]:
    """
    List all available MCP tools.

    Returns:
        JSON response with tool names, descriptions and input schemas
    """
    return {"tools": [tool.to_dict() for tool in list_tools()]}


@router.post("/extract-resources")
async def extract_resources(request: DiagramAnalysisRequest) -> Dict[str, Any]:
    """
    Extract Azure resources from an architecture diagram.

    Raises:
        HTTPException: 422 for an unsupported image type
    """
    analysis_service = DiagramAnalysisService()
    try:
        return await analysis_service.analyze_architecture_diagram(
            request.image_data,
            request.image_type or "base64"
        )
    except ValueError as error:
        raise HTTPException(
            status_code=422,
            detail={"status": "error", "message": str(error)}
        ) from error


@router.post("/get-pricing")
async def get_pricing(
    payload: Union[List[ResourceDescriptorModel], PricingRequest]
) -> Dict[str, Any]:
    """
    Get pricing information for Azure resources.

    Every resource yields one entry in `pricingData`, in request order.
    Resources that could not be priced carry an `error` instead of prices.

    Raises:
        HTTPException: 400 if the batch is malformed, 500 on unexpected errors
    """
    try:
        resolver = PricingResolver(pricing_client=AzurePricingClient())
        result = await resolver.get_resource_pricing(_unwrap_resources(payload))
        return result.to_dict()
    except PricingResolverError as error:
        raise _bad_request(error) from error
    except Exception as error:
        logger.error(f"Unexpected error during price resolution: {error}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail="Failed to get pricing"
        ) from error


@router.post("/calculate-cost")
async def calculate_cost(
    payload: Union[List[PriceQuoteModel], CostCalculationRequest]
) -> Dict[str, Any]:
    """
    Calculate total cost from pricing data.

    Raises:
        HTTPException: 400 if the batch is malformed
    """
    try:
        report = CostAggregator().aggregate(_unwrap_pricing_data(payload))
        return report.to_dict()
    except CostAggregatorError as error:
        raise _bad_request(error) from error


@router.post("/estimate-cost")
async def estimate_cost(
    payload: Union[List[ResourceDescriptorModel], PricingRequest]
) -> Dict[str, Any]:
    """
    Resolve prices and calculate totals in one call.

    Raises:
        HTTPException: 400 if the batch is malformed, 500 on unexpected errors
    """
    try:
        resolver = PricingResolver(pricing_client=AzurePricingClient())
        quotes = await resolver.resolve_prices(_unwrap_resources(payload))
        report = CostAggregator().aggregate(quotes)
        return report.to_dict()
    except (PricingResolverError, CostAggregatorError) as error:
        raise _bad_request(error) from error
    except Exception as error:
        logger.error(f"Unexpected error during cost estimation: {error}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail="Failed to estimate cost"
        ) from error
