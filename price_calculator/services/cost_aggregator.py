"""
Cost aggregator service.
Rolls priced quotes into a cost summary with a per-resource breakdown.
"""
from typing import List, Optional, Sequence
import logging

from price_calculator.core.config import config
from price_calculator.domain.cost_models import (
    CostLineItem,
    CostReport,
    CostSummary,
    HOURLY_PLACES,
    MONTHLY_PLACES,
    YEARLY_PLACES,
    ZERO,
    round_money,
)
from price_calculator.domain.pricing_models import PriceQuote


logger = logging.getLogger(__name__)


class CostAggregatorError(Exception):
    """Raised when the aggregator receives a malformed batch."""
    pass


class CostAggregator:
    """
    Service for aggregating priced quotes into a cost report.

    Failed quotes appear in the breakdown with their error and are excluded
    from totals. Totals are re-derived from each quote's unit hourly cost and
    quantity; upstream monthly and yearly values are ignored.

    The summary currency is the currency of the last successfully priced
    quote. There is no currency conversion: a batch mixing currencies is
    summed as-is and reported with a warning.
    """

    def __init__(
        self,
        notes: Optional[Sequence[str]] = None,
        default_currency: Optional[str] = None
    ):
        """
        Initialize cost aggregator.

        Args:
            notes: Advisory notes attached to every report (defaults to config)
            default_currency: Currency used when nothing was priced (defaults to config)
        """
        self.notes = list(notes) if notes is not None else list(config.COST_NOTES)
        self.default_currency = default_currency or config.DEFAULT_CURRENCY

    def aggregate(self, items: Sequence[PriceQuote]) -> CostReport:
        """
        Build a cost report from priced quotes.

        Args:
            items: Quotes in caller order (may include error-tagged quotes)

        Returns:
            CostReport with one breakdown entry per quote, in input order

        Raises:
            CostAggregatorError: If the collection is missing or holds non-quote entries
        """
        if items is None:
            raise CostAggregatorError("pricing data list is required")
        if isinstance(items, (str, bytes, dict)):
            raise CostAggregatorError("pricing data must be a list")

        logger.info(f"Calculating total costs for {len(items)} resources")

        total_hourly = ZERO
        total_monthly = ZERO
        total_yearly = ZERO
        currency = self.default_currency
        currencies_seen: List[str] = []
        breakdown: List[CostLineItem] = []

        for index, item in enumerate(items):
            if not isinstance(item, PriceQuote):
                raise CostAggregatorError(f"pricing data[{index}] is not a price quote")

            if item.is_error:
                breakdown.append(CostLineItem(
                    resource_label=item.resource_label,
                    error=item.error,
                ))
                continue

            item_hourly = item.hourly_cost * item.quantity
            item_monthly = item_hourly * config.HOURS_PER_MONTH
            item_yearly = item_hourly * config.HOURS_PER_YEAR

            # Sum unrounded values; rounding happens once on the totals
            total_hourly += item_hourly
            total_monthly += item_monthly
            total_yearly += item_yearly

            currency = item.currency_code or self.default_currency
            if currency not in currencies_seen:
                currencies_seen.append(currency)

            breakdown.append(CostLineItem(
                resource_label=item.resource_label,
                quantity=item.quantity,
                hourly_cost=round_money(item_hourly, HOURLY_PLACES),
                monthly_cost=round_money(item_monthly, MONTHLY_PLACES),
                yearly_cost=round_money(item_yearly, YEARLY_PLACES),
                currency_code=currency,
            ))

        warnings = []
        if len(currencies_seen) > 1:
            logger.warning(f"Mixed currencies in cost calculation: {', '.join(currencies_seen)}")
            warnings.append(
                f"Resources are priced in multiple currencies ({', '.join(currencies_seen)}); "
                f"totals are summed without conversion and labelled {currency}"
            )

        summary = CostSummary(
            total_hourly_cost=round_money(total_hourly, HOURLY_PLACES),
            total_monthly_cost=round_money(total_monthly, MONTHLY_PLACES),
            total_yearly_cost=round_money(total_yearly, YEARLY_PLACES),
            currency_code=currency,
        )

        return CostReport(
            summary=summary,
            breakdown=breakdown,
            notes=list(self.notes),
            warnings=warnings,
        )
