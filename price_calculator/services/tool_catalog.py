"""
Tool catalog for the discovery endpoint.
"""
from typing import List

from price_calculator.domain.tool_models import (
    ArraySchema,
    EnumSchema,
    IntegerSchema,
    McpTool,
    NumberSchema,
    ObjectSchema,
    StringSchema,
)


RESOURCE_SCHEMA = ObjectSchema(
    description="Azure resource to price; omitted fields are left out of the catalog filter",
    properties={
        "serviceName": StringSchema("Azure service name, e.g. 'Virtual Machines'"),
        "skuName": StringSchema("ARM SKU name, e.g. 'Standard_D2s_v3'"),
        "region": StringSchema("ARM region name", default="eastus"),
        "quantity": IntegerSchema("Number of instances", minimum=1, default=1),
        "notes": StringSchema("Optional free-text notes"),
    },
)

PRICED_RESOURCE_SCHEMA = ObjectSchema(
    description="Priced resource as returned by get_azure_resource_pricing",
    properties={
        "resourceLabel": StringSchema("Display label '<service> - <sku>'"),
        "quantity": IntegerSchema("Number of instances; at least 1 unless error is set"),
        "hourlyCost": NumberSchema("Hourly cost for one instance"),
        "currencyCode": StringSchema("ISO currency code", default="USD"),
        "error": StringSchema("Set when the resource could not be priced"),
    },
)


def list_tools() -> List[McpTool]:
    """Return the callable tools and their input schemas."""
    return [
        McpTool(
            name="extract_azure_resources_from_diagram",
            description=(
                "Analyzes an architecture diagram image and extracts a list of Azure resources "
                "present in the architecture. Returns a structured list of Azure services with "
                "their types and suggested quantities/configurations."
            ),
            input_schema=ObjectSchema(
                properties={
                    "image_data": StringSchema(
                        "Base64-encoded image data or URL of the architecture diagram"
                    ),
                    "image_type": EnumSchema(
                        values=["base64", "url"],
                        description="Type of image input (base64 or url)",
                        default="base64",
                    ),
                },
                required=["image_data"],
            ),
        ),
        McpTool(
            name="get_azure_resource_pricing",
            description=(
                "Gets pricing information for specified Azure resources using the Azure Retail "
                "Prices API. Returns detailed pricing for each resource including per-hour, "
                "per-month rates, and currency information."
            ),
            input_schema=ObjectSchema(
                properties={
                    "resources": ArraySchema(
                        "List of Azure resources to get pricing for",
                        items=RESOURCE_SCHEMA,
                    ),
                },
                required=["resources"],
            ),
        ),
        McpTool(
            name="calculate_total_cost",
            description=(
                "Calculates total monthly and yearly costs for a list of Azure resources with "
                "pricing. Takes pricing data from get_azure_resource_pricing and computes totals."
            ),
            input_schema=ObjectSchema(
                properties={
                    "pricing_data": ArraySchema(
                        "Array of resources with pricing information",
                        items=PRICED_RESOURCE_SCHEMA,
                    ),
                },
                required=["pricing_data"],
            ),
        ),
    ]
