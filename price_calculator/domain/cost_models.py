"""
Domain models for cost aggregation.
Defines the cost breakdown line items, the summary and the full report.
"""
from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN


ZERO = Decimal("0")

HOURLY_PLACES = 4
MONTHLY_PLACES = 2
YEARLY_PLACES = 2


def round_money(value: Decimal, places: int) -> Decimal:
    """
    Round a monetary value to a fixed number of decimal places.
    
    Uses banker's rounding (half to even).
    
    Args:
        value: Unrounded amount
        places: Number of decimal places to keep
    
    Returns:
        Rounded Decimal with exactly `places` decimal places
    """
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_EVEN)


def to_decimal(value: Any) -> Decimal:
    """
    Convert a JSON number (or numeric string) to Decimal.
    
    Floats go through str() so 0.096 stays 0.096 instead of its binary expansion.
    
    Raises:
        ValueError: If the value is not a finite non-negative number
    """
    if value is None:
        return ZERO
    if isinstance(value, bool):
        raise ValueError(f"Invalid monetary value: {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, TypeError) as error:
        raise ValueError(f"Invalid monetary value: {value!r}") from error
    if not amount.is_finite() or amount < 0:
        raise ValueError(f"Invalid monetary value: {value!r}")
    return amount


@dataclass(frozen=True)
class CostLineItem:
    """One row of the cost breakdown, successful or failed."""
    resource_label: str
    quantity: int = 0
    hourly_cost: Decimal = ZERO
    monthly_cost: Decimal = ZERO
    yearly_cost: Decimal = ZERO
    currency_code: Optional[str] = None
    error: Optional[str] = None
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            "resourceLabel": self.resource_label,
            "quantity": self.quantity,
            "hourlyCost": float(self.hourly_cost),
            "monthlyCost": float(self.monthly_cost),
            "yearlyCost": float(self.yearly_cost),
            "currencyCode": self.currency_code,
        }
        if self.error is not None:
            result["error"] = self.error
        return result


@dataclass(frozen=True)
class CostSummary:
    """Totals over all successfully priced line items."""
    total_hourly_cost: Decimal
    total_monthly_cost: Decimal
    total_yearly_cost: Decimal
    currency_code: str
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "totalHourlyCost": float(self.total_hourly_cost),
            "totalMonthlyCost": float(self.total_monthly_cost),
            "totalYearlyCost": float(self.total_yearly_cost),
            "currencyCode": self.currency_code,
        }


@dataclass(frozen=True)
class CostReport:
    """Complete cost calculation result."""
    summary: CostSummary
    breakdown: List[CostLineItem]
    notes: List[str]
    warnings: List[str] = field(default_factory=list)
    
    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the calculation result envelope.
        
        Breakdown keeps input order.
        """
        return {
            "status": "success",
            "currency": self.summary.currency_code,
            "summary": self.summary.to_dict(),
            "breakdown": [item.to_dict() for item in self.breakdown],
            "notes": list(self.notes),
            "warnings": list(self.warnings),
        }
