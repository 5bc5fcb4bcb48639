from decimal import Decimal

from domain.exceptions.index import EmptyBasket, ZeroWeight
from domain.models.basket import RatedAsset, RateConvention, RateSnapshot

ONE = Decimal('1')


def usd_value(asset: RatedAsset, convention: RateConvention, reference_code: str | None = None) -> Decimal:
	"""USD value of one unit of ``asset`` under the basket's rate convention."""
	if asset.code == reference_code:
		return ONE
	if convention is RateConvention.UNITS_PER_USD:
		return ONE / asset.rate
	return asset.rate


def weighted_average(snapshot: RateSnapshot) -> Decimal:
	"""Weight-normalized USD value of the basket: sum(usd_value * weight) / sum(weight)."""
	if not snapshot.rates:
		raise EmptyBasket(f'No {snapshot.asset_class.value} rate data available')

	convention = snapshot.asset_class.convention
	reference_code = snapshot.asset_class.reference_code

	weighted_sum = Decimal('0')
	total_weight = Decimal('0')
	for asset in snapshot.rates.values():
		weighted_sum += usd_value(asset, convention, reference_code) * asset.weight
		total_weight += asset.weight

	if total_weight == 0:
		raise ZeroWeight(f'Total {snapshot.asset_class.value} weight is zero')

	return weighted_sum / total_weight
