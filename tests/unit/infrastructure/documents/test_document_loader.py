# nosec B101


import json
import pytest
from decimal import Decimal

from infrastructure.documents.loader import DocumentLoader
from domain.exceptions.index import ConfigMissing
from domain.models.basket import AssetClass, Baseline
from config.settings import DEFAULT_DATA_DIR


def write_json(directory, name, payload):
    (directory / name).write_text(json.dumps(payload), encoding='utf-8')


def test_load_fiat_assets(tmp_path):
    write_json(tmp_path, 'fiats.json', [
        {'code': 'USD', 'name': 'US Dollar', 'weight': 0.5},
        {'code': 'eur', 'name': 'Euro', 'weight': 0.5},
    ])

    assets = DocumentLoader(tmp_path).load_assets(AssetClass.FIAT)

    assert [a.code for a in assets] == ['USD', 'EUR']
    assert assets[1].display_name == 'Euro'
    assert assets[1].weight == Decimal('0.5')
    assert assets[1].source_id is None


def test_load_crypto_assets_accepts_symbol_and_coingecko_id(tmp_path):
    write_json(tmp_path, 'cryptos.json', [
        {'symbol': 'BTC', 'name': 'Bitcoin', 'weight': 1, 'coingecko_id': 'bitcoin'},
    ])

    assets = DocumentLoader(tmp_path).load_assets(AssetClass.CRYPTO)

    assert assets[0].code == 'BTC'
    assert assets[0].provider_id == 'bitcoin'


def test_missing_asset_file_yields_empty_list(tmp_path):
    assert DocumentLoader(tmp_path).load_assets(AssetClass.FIAT) == []


def test_missing_asset_file_raises_in_strict_mode(tmp_path):
    with pytest.raises(ConfigMissing):
        DocumentLoader(tmp_path).load_assets_strict(AssetClass.FIAT)


@pytest.mark.parametrize('payload', [
    [{'code': 'USD', 'name': 'US Dollar', 'weight': -1}],
    [{'code': 'USD', 'weight': 1}],
    {'code': 'USD', 'name': 'US Dollar', 'weight': 1},
    [{'code': 'USD', 'name': 'US Dollar', 'weight': 1}, {'code': 'usd', 'name': 'Dup', 'weight': 1}],
])
def test_invalid_asset_document_yields_empty_list(tmp_path, payload):
    write_json(tmp_path, 'fiats.json', payload)

    assert DocumentLoader(tmp_path).load_assets(AssetClass.FIAT) == []


def test_duplicate_provider_ids_rejected(tmp_path):
    write_json(tmp_path, 'cryptos.json', [
        {'symbol': 'BTC', 'name': 'Bitcoin', 'weight': 1, 'coingecko_id': 'bitcoin'},
        {'symbol': 'WBTC', 'name': 'Wrapped Bitcoin', 'weight': 1, 'coingecko_id': 'bitcoin'},
    ])
    loader = DocumentLoader(tmp_path)

    with pytest.raises(ConfigMissing, match='duplicate provider ids: bitcoin'):
        loader.load_assets_strict(AssetClass.CRYPTO)
    assert loader.load_assets(AssetClass.CRYPTO) == []


def test_unparseable_asset_file_yields_empty_list(tmp_path):
    (tmp_path / 'fiats.json').write_text('{ not json', encoding='utf-8')

    assert DocumentLoader(tmp_path).load_assets(AssetClass.FIAT) == []


# ============================================================================
# TEST: Baseline
# ============================================================================

def test_load_baseline(tmp_path):
    write_json(tmp_path, 'baseline.json', {
        'timestamp': '2025-01-01T00:00:00Z',
        'avgx_value': 1.5,
        'fiat_rates': {'eur': 0.96, 'JPY': 157.2},
        'crypto_prices': {'BTC': 93500},
    })

    baseline = DocumentLoader(tmp_path).load_baseline()

    assert baseline.timestamp == '2025-01-01T00:00:00Z'
    assert baseline.avgx_value == Decimal('1.5')
    assert baseline.wf_value is None
    assert baseline.rates_for(AssetClass.FIAT) == {'EUR': Decimal('0.96'), 'JPY': Decimal('157.2')}
    assert baseline.rates_for(AssetClass.CRYPTO) == {'BTC': Decimal('93500')}


def test_missing_baseline_yields_empty_baseline(tmp_path):
    assert DocumentLoader(tmp_path).load_baseline() == Baseline()


def test_invalid_baseline_yields_empty_baseline(tmp_path):
    write_json(tmp_path, 'baseline.json', {'fiat_rates': {'EUR': 'abc'}})

    assert DocumentLoader(tmp_path).load_baseline() == Baseline()


def test_bundled_documents_load():
    loader = DocumentLoader(DEFAULT_DATA_DIR)

    fiats = loader.load_assets_strict(AssetClass.FIAT)
    cryptos = loader.load_assets_strict(AssetClass.CRYPTO)
    baseline = loader.load_baseline()

    assert fiats[0].code == 'USD'
    assert {'BTC', 'ETH'} <= {c.code for c in cryptos}
    assert baseline.fiat_rates['EUR'] > 0
