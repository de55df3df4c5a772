import asyncio
import threading
import time
from concurrent.futures import ThreadPoolExecutor

from solflow_api import deps
from solflow_api.services.store import InMemoryWorkflowStore


def test_store_is_built_once_under_concurrent_first_use(monkeypatch):
    built = []
    start = threading.Barrier(8)

    def slow_build():
        time.sleep(0.05)
        store = InMemoryWorkflowStore()
        built.append(store)
        return store

    monkeypatch.setattr(deps, "_store", None)
    monkeypatch.setattr(deps, "_build_store", slow_build)

    def first_use(_):
        start.wait()
        return deps.get_workflow_store()

    with ThreadPoolExecutor(max_workers=8) as pool:
        stores = list(pool.map(first_use, range(8)))

    assert len(built) == 1
    assert all(s is built[0] for s in stores)


def test_ledger_is_shared_across_threads(monkeypatch):
    monkeypatch.setattr(deps, "_ledger", None)
    start = threading.Barrier(8)

    def first_use(_):
        start.wait()
        return deps.get_payment_ledger()

    with ThreadPoolExecutor(max_workers=8) as pool:
        ledgers = list(pool.map(first_use, range(8)))

    assert len({id(ledger) for ledger in ledgers}) == 1


def test_empty_wallet_header_means_no_owner():
    assert asyncio.run(deps.wallet_address("")) is None
    assert asyncio.run(deps.wallet_address("abc")) == "abc"
