"""Progressive PAYE calculation over an ordered band schedule."""

from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from payslip_engine.calculators.types import ZERO, TaxBand

# Annual NGN schedule. Widths, not cumulative limits; last band unbounded.
DEFAULT_BANDS: tuple[TaxBand, ...] = (
    TaxBand(width=Decimal("300000"), rate=Decimal("0.07")),
    TaxBand(width=Decimal("300000"), rate=Decimal("0.11")),
    TaxBand(width=Decimal("500000"), rate=Decimal("0.15")),
    TaxBand(width=Decimal("500000"), rate=Decimal("0.19")),
    TaxBand(width=Decimal("1600000"), rate=Decimal("0.21")),
    TaxBand(width=None, rate=Decimal("0.24")),
)


class TaxCalculator:
    """Applies a marginal-rate schedule to a taxable amount.

    Bands are consumed in the order given, each taking
    ``min(remaining, width)`` of what is left. The final band is always
    treated as unbounded, whatever width it declares, so any amount is
    fully consumed. Negative amounts are clamped to 0.

    Results are not rounded; rounding happens once, on the emitted payslip.
    """

    def __init__(self, bands: Sequence[TaxBand] = DEFAULT_BANDS):
        if not bands:
            raise ValueError("Tax schedule needs at least one band")
        for band in bands:
            if band.rate < 0:
                raise ValueError(f"Band rate must not be negative, got {band.rate}")
            if band.width is not None and band.width < 0:
                raise ValueError(f"Band width must not be negative, got {band.width}")
        self.bands = tuple(bands)

    def compute_tax(self, taxable_amount: Decimal) -> Decimal:
        """Total tax due on ``taxable_amount``."""
        return sum((tax for _, _, tax in self.band_breakdown(taxable_amount)), ZERO)

    def band_breakdown(
        self, taxable_amount: Decimal
    ) -> list[tuple[TaxBand, Decimal, Decimal]]:
        """Per-band ``(band, consumed, tax)`` rows, stopping at the last band touched."""
        remaining = max(ZERO, taxable_amount)
        rows: list[tuple[TaxBand, Decimal, Decimal]] = []
        last = len(self.bands) - 1

        for i, band in enumerate(self.bands):
            if remaining <= 0:
                break

            if i == last or band.width is None:
                consumed = remaining
            else:
                consumed = min(remaining, band.width)

            rows.append((band, consumed, consumed * band.rate))
            remaining -= consumed

        return rows


def compute_tax(
    taxable_amount: Decimal, bands: Sequence[TaxBand] = DEFAULT_BANDS
) -> Decimal:
    """Compute progressive tax on ``taxable_amount`` using ``bands``."""
    return TaxCalculator(bands).compute_tax(taxable_amount)
