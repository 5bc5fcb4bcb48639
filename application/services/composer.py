from datetime import UTC, datetime
from decimal import Decimal

from domain.models.basket import IndexValue

# Share of the fiat basket in the index; the crypto basket gets the rest.
FIAT_BLEND_WEIGHT = Decimal('0.5')


def compose_index(
	fiat_average: Decimal,
	crypto_average: Decimal,
	prior_value: Decimal | None = None,
	timestamp: datetime | None = None,
	fiat_blend_weight: Decimal = FIAT_BLEND_WEIGHT,
) -> IndexValue:
	"""Blends the two basket averages into the AVGX value.

	``avgx = F * WF + (1 - F) * WC`` with ``F = fiat_blend_weight``. ``change24h`` is the
	percent change against ``prior_value`` and stays None when there is nothing to compare to.
	"""
	if not 0 <= fiat_blend_weight <= 1:
		raise ValueError(f'fiat_blend_weight must be within [0, 1], got {fiat_blend_weight}')

	avgx_usd = fiat_blend_weight * fiat_average + (1 - fiat_blend_weight) * crypto_average

	change24h = None
	if prior_value is not None and prior_value != 0:
		change24h = (avgx_usd - prior_value) / prior_value * 100

	return IndexValue(
		avgx_usd=avgx_usd,
		wf_value=fiat_average,
		wc_value=crypto_average,
		timestamp=timestamp or datetime.now(UTC),
		change24h=change24h,
	)
