"""
Use-case: retrieve the current spot price snapshot for the configured instrument.
Depends only on Domain ports and entities: no infrastructure imports.
"""

from gold_monitor.domain.entities.market_data import PriceSnapshot
from gold_monitor.domain.ports.market_data_port import IMarketDataProvider


class GetPriceSnapshotUseCase:
    def __init__(self, provider: IMarketDataProvider) -> None:
        self._provider = provider

    async def execute(self) -> PriceSnapshot:
        """Fetch the latest ticker.

        Raises:
            Any UpstreamError propagated from the IMarketDataProvider.
        """
        return await self._provider.get_ticker()
