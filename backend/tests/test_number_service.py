"""
Document number generation tests.
"""
import asyncio
from datetime import datetime, timezone

from database import MemoryStore
from services.number_service import NumberService

NOW = datetime(2026, 3, 14, tzinfo=timezone.utc)


def _generate(store, kind, now=NOW):
    return asyncio.run(NumberService.generate(store, kind, now))


class TestNumberFormats:
    def test_order_number(self):
        assert _generate(MemoryStore(), "order") == "ORD-2026-000001"

    def test_tracking_number_joins_year_and_sequence(self):
        assert _generate(MemoryStore(), "tracking") == "TRK-FX-26000001"

    def test_invoice_and_truck_request_numbers(self):
        store = MemoryStore()
        assert _generate(store, "invoice") == "INV-2026-000001"
        assert _generate(store, "truck_request") == "TRQ-2026-000001"

    def test_preview(self):
        year = datetime.now(timezone.utc).year
        assert NumberService.preview_format("order") == f"ORD-{year}-XXXXXX"
        assert NumberService.preview_format("tracking") == f"TRK-FX-{str(year)[-2:]}XXXXXX"


class TestSequences:
    def test_counters_are_per_kind(self):
        store = MemoryStore()
        _generate(store, "order")
        _generate(store, "order")
        assert _generate(store, "order") == "ORD-2026-000003"
        assert _generate(store, "invoice") == "INV-2026-000001"

    def test_counter_restarts_each_year(self):
        store = MemoryStore()
        _generate(store, "order")
        next_year = datetime(2027, 1, 1, tzinfo=timezone.utc)
        assert _generate(store, "order", next_year) == "ORD-2027-000001"

    def test_concurrent_generation_is_unique(self):
        store = MemoryStore()

        async def burst():
            return await asyncio.gather(*[NumberService.generate(store, "order", NOW) for _ in range(25)])

        numbers = asyncio.run(burst())
        assert len(set(numbers)) == 25
