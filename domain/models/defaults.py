from decimal import Decimal

from domain.models.basket import AssetClass

GENERIC_DEFAULT_RATE = Decimal('1')

# Units of currency per 1 USD, used only when neither the provider nor the baseline has a rate.
DEFAULT_FIAT_RATES: dict[str, Decimal] = {
	code: Decimal(value)
	for code, value in {
		'EUR': '0.85',
		'CNY': '7.25',
		'JPY': '110',
		'GBP': '0.73',
		'INR': '75',
		'CAD': '1.25',
		'AUD': '1.35',
		'CHF': '0.90',
		'SEK': '8.5',
		'NOK': '8.8',
		'DKK': '6.2',
		'NZD': '1.45',
		'SGD': '1.35',
		'HKD': '7.8',
		'KRW': '1200',
		'BRL': '5.2',
		'RUB': '75',
		'ZAR': '15',
		'AED': '3.67',
		'SAR': '3.75',
		'TRY': '8.5',
		'MXN': '20',
		'THB': '32',
		'IDR': '14500',
		'MYR': '4.2',
		'PHP': '50',
		'PLN': '3.8',
		'HUF': '300',
		'CZK': '22',
		'CLP': '800',
		'COP': '3800',
		'ILS': '3.2',
		'EGP': '15.7',
		'PKR': '160',
		'NGN': '410',
		'KES': '110',
		'BDT': '85',
		'VND': '23000',
		'ARS': '100',
		'PEN': '3.7',
		'QAR': '3.64',
		'KWD': '0.30',
		'BHD': '0.38',
		'OMR': '0.38',
		'MAD': '9.2',
		'TND': '2.8',
		'UAH': '27',
		'LKR': '200',
		'RON': '4.2',
		'BGN': '1.65',
		'HRK': '6.5',
	}.items()
}

# USD price per coin.
DEFAULT_CRYPTO_PRICES: dict[str, Decimal] = {
	code: Decimal(value)
	for code, value in {
		'BTC': '60000',
		'ETH': '3000',
		'BNB': '550',
		'SOL': '150',
		'XRP': '0.55',
		'ADA': '0.45',
		'DOGE': '0.12',
		'AVAX': '30',
		'DOT': '6',
		'MATIC': '0.7',
		'LTC': '80',
		'LINK': '15',
		'USDT': '1',
		'USDC': '1',
	}.items()
}


def default_rate_for(asset_class: AssetClass, code: str) -> Decimal:
	table = DEFAULT_FIAT_RATES if asset_class is AssetClass.FIAT else DEFAULT_CRYPTO_PRICES
	return table.get(code, GENERIC_DEFAULT_RATE)
