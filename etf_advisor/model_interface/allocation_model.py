from .types import EngineProfile, MarketContext, AllocationResult


class AllocationModel:
    def allocate(self, profile: EngineProfile, amount: float, market: MarketContext) -> AllocationResult:
        raise NotImplementedError
