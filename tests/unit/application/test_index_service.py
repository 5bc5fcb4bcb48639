# nosec B101


import pytest
import redis
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from application.services.basket_service import BasketService
from application.services.composer import FIAT_BLEND_WEIGHT, compose_index
from application.services.index_service import AvgxIndexService
from domain.exceptions.index import CacheError, InvalidTimeframe, ZeroWeight
from domain.models.basket import (
    AssetClass,
    Baseline,
    IndexPoint,
    RatedAsset,
    RateOrigin,
    RateSnapshot,
)
from infrastructure.cache.history_store import InMemoryHistoryStore, RedisHistoryStore


NOW = datetime(2025, 11, 5, 12, 0, 0, tzinfo=UTC)


# ============================================================================
# TEST: compose_index()
# ============================================================================

def test_compose_index_blends_baskets_evenly_by_default():
    index = compose_index(Decimal('1'), Decimal('3'), timestamp=NOW)

    assert FIAT_BLEND_WEIGHT == Decimal('0.5')
    assert index.avgx_usd == Decimal('2')
    assert index.wf_value == Decimal('1')
    assert index.wc_value == Decimal('3')
    assert index.timestamp == NOW


def test_compose_index_custom_blend_weight():
    index = compose_index(Decimal('1'), Decimal('3'), fiat_blend_weight=Decimal('0.75'))

    assert index.avgx_usd == Decimal('1.5')


def test_compose_index_change24h_is_none_without_prior():
    index = compose_index(Decimal('1'), Decimal('3'))

    assert index.change24h is None


def test_compose_index_change24h_percent():
    index = compose_index(Decimal('1'), Decimal('3'), prior_value=Decimal('1.6'))

    assert index.change24h == Decimal('25')


def test_compose_index_rejects_blend_weight_outside_unit_interval():
    with pytest.raises(ValueError):
        compose_index(Decimal('1'), Decimal('3'), fiat_blend_weight=Decimal('1.5'))


# ============================================================================
# TEST: AvgxIndexService
# ============================================================================

def basket_snapshot(asset_class, code, rate, origin=RateOrigin.LIVE, weight='1'):
    return RateSnapshot(
        asset_class=asset_class,
        rates={code: RatedAsset(code, code, Decimal(weight), Decimal(rate))},
        fetched_at=NOW,
        sourced={code: origin},
    )


def make_basket(asset_class, snapshot, missing=None, n_assets=1):
    basket = MagicMock(spec=BasketService)
    basket.asset_class = asset_class
    basket.assets = [object()] * n_assets
    basket.get_snapshot = AsyncMock(return_value=snapshot)
    basket.get_missing_codes.return_value = missing or []
    return basket


class FakeClock:
    def __init__(self):
        self.now = NOW

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fiat():
    return make_basket(
        AssetClass.FIAT, basket_snapshot(AssetClass.FIAT, 'EUR', '0.5'), missing=['NGN'], n_assets=2
    )


@pytest.fixture
def crypto():
    return make_basket(
        AssetClass.CRYPTO, basket_snapshot(AssetClass.CRYPTO, 'BTC', '2', RateOrigin.BASELINE)
    )


@pytest.fixture
def history():
    return InMemoryHistoryStore()


@pytest.fixture
def service(fiat, crypto, history, clock):
    baseline = Baseline(
        timestamp='2025-01-01T00:00:00Z',
        avgx_value=Decimal('1.9'),
        wf_value=Decimal('0.9'),
        wc_value=Decimal('2.9'),
    )
    return AvgxIndexService(
        fiat=fiat,
        crypto=crypto,
        history=history,
        baseline=baseline,
        history_interval=timedelta(minutes=5),
        clock=clock,
    )


@pytest.mark.asyncio
async def test_current_index_without_history_has_no_change(service, history):
    index = await service.get_current_index()

    assert index.avgx_usd == Decimal('2')
    assert index.change24h is None
    assert index.timestamp == NOW
    assert [p.avgx_usd for p in await history.since(NOW - timedelta(days=1))] == [Decimal('2')]


@pytest.mark.asyncio
async def test_current_index_change24h_against_day_old_point(service, history):
    await history.append(IndexPoint(timestamp=NOW - timedelta(hours=24, minutes=30), avgx_usd=Decimal('1.6')))
    await history.append(IndexPoint(timestamp=NOW - timedelta(hours=2), avgx_usd=Decimal('1.9')))

    index = await service.get_current_index()

    assert index.change24h == Decimal('25')


@pytest.mark.asyncio
async def test_current_index_ignores_prior_far_older_than_a_day(service, history):
    await history.append(IndexPoint(timestamp=NOW - timedelta(days=3), avgx_usd=Decimal('1.6')))

    index = await service.get_current_index()

    assert index.change24h is None


@pytest.mark.asyncio
async def test_current_index_survives_unreachable_history(fiat, crypto, clock):
    redis_client = AsyncMock()
    redis_client.zrevrangebyscore.side_effect = redis.exceptions.ConnectionError('down')
    redis_client.zrevrange.side_effect = redis.exceptions.ConnectionError('down')
    service = AvgxIndexService(
        fiat=fiat, crypto=crypto, history=RedisHistoryStore(redis_client), baseline=Baseline(), clock=clock
    )

    index = await service.get_current_index()

    assert index.avgx_usd == Decimal('2')
    assert index.change24h is None
    redis_client.zadd.assert_not_called()


@pytest.mark.asyncio
async def test_current_index_survives_corrupt_history(fiat, crypto, clock):
    redis_client = AsyncMock()
    redis_client.zrevrangebyscore.return_value = ['not json']
    redis_client.zrevrange.return_value = ['not json']
    service = AvgxIndexService(
        fiat=fiat, crypto=crypto, history=RedisHistoryStore(redis_client), baseline=Baseline(), clock=clock
    )

    index = await service.get_current_index()

    assert index.avgx_usd == Decimal('2')
    assert index.change24h is None


@pytest.mark.asyncio
async def test_failed_history_append_is_skipped(service, history):
    history.append = AsyncMock(side_effect=CacheError('write failed'))

    index = await service.get_current_index()

    assert index.avgx_usd == Decimal('2')
    history.append.assert_awaited_once()


@pytest.mark.asyncio
async def test_history_recorded_at_most_once_per_interval(service, history, clock):
    await service.get_current_index()
    clock.advance(minutes=1)
    await service.get_current_index()
    clock.advance(minutes=5)
    await service.get_current_index()

    points = await history.since(NOW - timedelta(days=1))
    assert [p.timestamp for p in points] == [NOW, NOW + timedelta(minutes=6)]


@pytest.mark.asyncio
async def test_basket_errors_propagate(service, fiat):
    fiat.get_snapshot.return_value = basket_snapshot(AssetClass.FIAT, 'EUR', '0.5', weight='0')

    with pytest.raises(ZeroWeight):
        await service.get_current_index()


@pytest.mark.asyncio
async def test_detailed_breakdown_includes_origins(service):
    breakdown = await service.get_detailed_breakdown()

    assert breakdown['avgx'].avgx_usd == Decimal('2')
    assert breakdown['fiat_basket'] == [{
        'code': 'EUR',
        'name': 'EUR',
        'weight': Decimal('1'),
        'rate': Decimal('0.5'),
        'usd_value': Decimal('2'),
        'origin': 'LIVE',
    }]
    assert breakdown['crypto_basket'][0]['usd_value'] == Decimal('2')
    assert breakdown['crypto_basket'][0]['origin'] == 'BASELINE'


@pytest.mark.asyncio
async def test_detailed_breakdown_uses_one_snapshot_per_basket(service, fiat, crypto):
    fiat.get_snapshot.side_effect = [
        basket_snapshot(AssetClass.FIAT, 'EUR', '0.5'),
        basket_snapshot(AssetClass.FIAT, 'EUR', '0.25'),
    ]

    breakdown = await service.get_detailed_breakdown()

    assert breakdown['avgx'].wf_value == Decimal('2')
    assert breakdown['fiat_basket'][0]['usd_value'] == Decimal('2')
    assert fiat.get_snapshot.await_count == 1
    assert crypto.get_snapshot.await_count == 1


@pytest.mark.asyncio
@pytest.mark.parametrize('timeframe, expected', [('24h', 1), ('7d', 2), ('30d', 3)])
async def test_historical_data_windows(service, history, timeframe, expected):
    for age in [timedelta(days=20), timedelta(days=3), timedelta(hours=1)]:
        await history.append(IndexPoint(timestamp=NOW - age, avgx_usd=Decimal('2')))

    points = await service.get_historical_data(timeframe)

    assert len(points) == expected


@pytest.mark.asyncio
async def test_historical_data_rejects_unknown_timeframe(service):
    with pytest.raises(InvalidTimeframe) as exc_info:
        await service.get_historical_data('1y')

    assert '24h, 7d, 30d' in str(exc_info.value)


def test_baseline_status(service):
    status = service.get_baseline_status()

    assert status == {
        'baseline_timestamp': '2025-01-01T00:00:00Z',
        'config': {'total_fiats': 2, 'total_cryptos': 1},
        'missing_data': {'fiat_currencies': ['NGN'], 'cryptocurrencies': []},
        'baseline_values': {
            'avgx_value': Decimal('1.9'),
            'wf_value': Decimal('0.9'),
            'wc_value': Decimal('2.9'),
        },
    }
