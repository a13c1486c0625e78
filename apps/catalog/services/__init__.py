from .inheritance import (
    InstrumentInheritanceService,
    merge_instruments,
    resolve_effective_instrument,
)
from .market import (
    MarketDataService,
    process_stale_alerts,
    run_price_alert,
    sync_market_data_batch,
)

__all__ = [
    'InstrumentInheritanceService',
    'merge_instruments',
    'resolve_effective_instrument',
    'MarketDataService',
    'process_stale_alerts',
    'run_price_alert',
    'sync_market_data_batch',
]
