"""
Configuration module for loading environment variables.
All tunable values are read from the environment with safe defaults.
"""
import os
from typing import List, Tuple


class Config:
    """Application configuration loaded from environment variables."""
    
    # Azure Retail Prices API (public, no authentication)
    AZURE_PRICING_API_URL: str = os.getenv(
        "AZURE_PRICING_API_URL",
        "https://prices.azure.com/api/retail/prices"
    ).rstrip("/")
    AZURE_PRICING_TIMEOUT_SECONDS: float = float(os.getenv("AZURE_PRICING_TIMEOUT_SECONDS", "10"))
    PRICING_MAX_CONCURRENCY: int = int(os.getenv("PRICING_MAX_CONCURRENCY", "5"))
    
    # Resource defaults
    DEFAULT_REGION: str = os.getenv("DEFAULT_REGION", "eastus")
    DEFAULT_CURRENCY: str = os.getenv("DEFAULT_CURRENCY", "USD")
    
    # Request limits
    MAX_RESOURCES_PER_REQUEST: int = int(os.getenv("MAX_RESOURCES_PER_REQUEST", "100"))
    MAX_REQUEST_BODY_SIZE: int = int(os.getenv("MAX_REQUEST_BODY_SIZE", "10485760"))  # 10 MB
    
    # Server
    CORS_ALLOW_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
        if origin.strip()
    ]
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    
    # Cost projection constants (fixed, not configurable)
    HOURS_PER_MONTH: int = 730  # Average hours per month
    HOURS_PER_YEAR: int = 8760  # 365 * 24
    
    COST_NOTES: Tuple[str, ...] = (
        "Monthly costs calculated based on 730 hours per month (average)",
        "Yearly costs calculated based on 8760 hours per year",
        "Costs may vary based on actual usage patterns",
        "Additional costs may apply for data transfer, storage transactions, etc.",
    )
    
    @classmethod
    def validate(cls) -> None:
        """
        Validates configuration values.
        
        Raises:
            ValueError: If any configuration value is missing or invalid.
        """
        if not cls.AZURE_PRICING_API_URL.startswith(("http://", "https://")):
            raise ValueError(
                f"AZURE_PRICING_API_URL must be a valid URL (got: {cls.AZURE_PRICING_API_URL})"
            )
        if cls.AZURE_PRICING_TIMEOUT_SECONDS <= 0:
            raise ValueError("AZURE_PRICING_TIMEOUT_SECONDS must be positive")
        if cls.PRICING_MAX_CONCURRENCY < 1:
            raise ValueError("PRICING_MAX_CONCURRENCY must be at least 1")
        if cls.MAX_RESOURCES_PER_REQUEST < 1:
            raise ValueError("MAX_RESOURCES_PER_REQUEST must be at least 1")
        if not cls.DEFAULT_REGION:
            raise ValueError("DEFAULT_REGION is required")
        if not cls.DEFAULT_CURRENCY:
            raise ValueError("DEFAULT_CURRENCY is required")


config = Config()
