"""Concurrent cart mutations: no lost updates, at most one pending cart."""
import threading

from storefront.data.memory_store import InMemoryDocumentStore
from storefront.domain.errors import ErrorCode
from storefront.services.cart_service import CartService
from storefront.services.product_service import ProductService
from storefront.services.transaction_runner import TransactionRunner

from conftest import RecordingNotifier, product_fields

OWNER = "user-u"
SELLER = "seller-1"


class RacingStore(InMemoryDocumentStore):
    """Runs `on_write` once, right before the next cart write or create lands."""

    def __init__(self):
        super().__init__()
        self.on_write = None

    def _fire(self, kind):
        if kind == "carts" and self.on_write is not None:
            hook, self.on_write = self.on_write, None
            hook()

    def create(self, kind, value, doc_id=None):
        self._fire(kind)
        return super().create(kind, value, doc_id)

    def write_if(self, kind, doc_id, value, expected_version):
        self._fire(kind)
        return super().write_if(kind, doc_id, value, expected_version)


def make_services(store, max_attempts=5):
    runner = TransactionRunner(max_attempts=max_attempts, backoff=0)
    products = ProductService(store, runner=runner)
    carts = CartService(store, runner=runner, notifier=RecordingNotifier())
    return products, carts


def run_threads(workers):
    barrier = threading.Barrier(len(workers))
    results = [None] * len(workers)

    def target(index, work):
        barrier.wait()
        results[index] = work()

    threads = [threading.Thread(target=target, args=(i, w)) for i, w in enumerate(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return results


class TestInterleavedWrites:
    def test_competing_add_before_write_is_not_lost(self):
        store = RacingStore()
        products, carts = make_services(store)
        product = products.create_product(SELLER, **product_fields(stock=10)).unwrap()
        carts.add_line(OWNER, product.id, 1).unwrap()

        store.on_write = lambda: carts.add_line(OWNER, product.id, 2).unwrap()
        cart = carts.add_line(OWNER, product.id, 3).unwrap()

        assert cart.lines[product.id].quantity == 6

    def test_competing_first_add_creates_one_cart(self):
        store = RacingStore()
        products, carts = make_services(store)
        a = products.create_product(SELLER, **product_fields()).unwrap()
        b = products.create_product(SELLER, **product_fields()).unwrap()

        store.on_write = lambda: carts.add_line(OWNER, a.id, 1).unwrap()
        cart = carts.add_line(OWNER, b.id, 2).unwrap()

        assert store.query_owner_pending(OWNER) == [cart.id]
        assert {pid: line.quantity for pid, line in cart.lines.items()} == {a.id: 1, b.id: 2}

    def test_checkout_racing_add_moves_add_to_new_cart(self):
        store = RacingStore()
        products, carts = make_services(store)
        product = products.create_product(SELLER, **product_fields()).unwrap()
        old = carts.add_line(OWNER, product.id, 1).unwrap()

        store.on_write = lambda: carts.checkout(OWNER).unwrap()
        cart = carts.add_line(OWNER, product.id, 2).unwrap()

        assert cart.id != old.id
        assert cart.lines[product.id].quantity == 2
        completed = carts.get_cart_by_id(OWNER, old.id).unwrap()
        assert completed.lines[product.id].quantity == 1

    def test_clear_racing_remove_reports_missing_line(self):
        store = RacingStore()
        products, carts = make_services(store)
        product = products.create_product(SELLER, **product_fields()).unwrap()
        carts.add_line(OWNER, product.id, 1).unwrap()

        store.on_write = lambda: carts.clear_cart(OWNER).unwrap()
        result = carts.remove_line(OWNER, product.id)

        assert result.error.code == ErrorCode.NOT_FOUND

    def test_stock_drop_between_attempts_is_seen_on_retry(self):
        store = RacingStore()
        products, carts = make_services(store)
        product = products.create_product(SELLER, **product_fields(stock=5)).unwrap()
        carts.add_line(OWNER, product.id, 1).unwrap()

        def competing():
            products.update_product(SELLER, product.id, {"stock": 2}).unwrap()
            carts.add_line(OWNER, product.id, 1).unwrap()

        store.on_write = competing
        result = carts.add_line(OWNER, product.id, 4)

        assert result.error.code == ErrorCode.UNAVAILABLE
        assert carts.get_cart(OWNER).unwrap().lines[product.id].quantity == 2


class TestThreads:
    def test_parallel_adds_sum_up(self):
        store = InMemoryDocumentStore()
        products, carts = make_services(store, max_attempts=100)
        product = products.create_product(SELLER, **product_fields(stock=100)).unwrap()
        carts.add_line(OWNER, product.id, 1).unwrap()

        workers = [lambda: carts.add_line(OWNER, product.id, 1) for _ in range(8)]
        results = run_threads(workers)

        assert all(result.ok for result in results)
        assert carts.get_cart(OWNER).unwrap().lines[product.id].quantity == 9

    def test_parallel_first_adds_share_one_cart(self):
        store = InMemoryDocumentStore()
        products, carts = make_services(store, max_attempts=100)
        ids = [products.create_product(SELLER, **product_fields()).unwrap().id for _ in range(6)]

        workers = [lambda pid=pid: carts.add_line(OWNER, pid, 1) for pid in ids]
        results = run_threads(workers)

        assert all(result.ok for result in results)
        assert len(store.query_owner_pending(OWNER)) == 1
        cart = carts.get_cart(OWNER).unwrap()
        assert sorted(cart.lines) == sorted(ids)
