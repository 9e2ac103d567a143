"""
Diagram analysis service.
Placeholder that returns example resources for an architecture diagram.
"""
from typing import Dict, Any, List
import logging

from price_calculator.domain.pricing_models import ResourceDescriptor


logger = logging.getLogger(__name__)


SUPPORTED_IMAGE_TYPES = ("base64", "url")

EXAMPLE_RESOURCES: List[ResourceDescriptor] = [
    ResourceDescriptor(
        service_name="Virtual Machines",
        sku_name="Standard_D2s_v3",
        quantity=2,
        region="eastus",
        notes="Example: Web application servers",
    ),
    ResourceDescriptor(
        service_name="Azure SQL Database",
        sku_name="S3",
        quantity=1,
        region="eastus",
        notes="Example: Application database",
    ),
    ResourceDescriptor(
        service_name="Storage",
        sku_name="Standard_LRS",
        quantity=1,
        region="eastus",
        notes="Example: Blob storage for assets",
    ),
    ResourceDescriptor(
        service_name="Azure App Service",
        sku_name="P1v2",
        quantity=1,
        region="eastus",
        notes="Example: Application hosting",
    ),
]


class DiagramAnalysisService:
    """Service for extracting Azure resources from architecture diagrams."""

    async def analyze_architecture_diagram(
        self,
        image_data: str,
        image_type: str = "base64"
    ) -> Dict[str, Any]:
        """
        Analyze an architecture diagram.

        No image recognition is performed yet: the detected resources are a
        fixed example set showing the response structure.

        Args:
            image_data: Base64-encoded image or image URL
            image_type: 'base64' or 'url'

        Returns:
            Analysis result with detected resources

        Raises:
            ValueError: If the input is empty or the image type is unknown
        """
        if not image_data:
            raise ValueError("image_data is required")
        if image_type not in SUPPORTED_IMAGE_TYPES:
            raise ValueError(
                f"image_type must be one of {', '.join(SUPPORTED_IMAGE_TYPES)} (got: {image_type})"
            )

        logger.info(f"Analyzing architecture diagram ({image_type}, {len(image_data)} chars)")

        return {
            "status": "success",
            "message": "Architecture diagram analyzed successfully",
            "detectedResources": [resource.to_dict() for resource in EXAMPLE_RESOURCES],
            "note": (
                "To fully enable this feature, configure AZURE_COMPUTER_VISION_KEY "
                "or OPENAI_API_KEY environment variable"
            ),
        }
