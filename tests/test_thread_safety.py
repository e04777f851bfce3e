"""Tests for concurrent use of factories and contexts."""

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from beanwire import ConstructionFactory, InjectionSite, Maybe, ResolutionContext, Resolver


class NeedsToken:
    def __init__(self, token: int) -> None:
        self.token = token


class CountingInspector:
    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.inspections = 0
        self.resolutions = 0

    def find_resolver(self, site: InjectionSite) -> Resolver | None:
        with self.lock:
            self.inspections += 1
        return self._resolve

    def _resolve(self, site: InjectionSite) -> Maybe:
        with self.lock:
            self.resolutions += 1
            return Maybe.produced(self.resolutions)


class Registered:
    pass


class TestConcurrentFactory:
    def test_strategy_is_chosen_once_under_concurrent_first_calls(self) -> None:
        """Concurrent first calls search for a builder only once."""
        inspector = CountingInspector()
        factory = ConstructionFactory(NeedsToken).with_inspector(inspector)
        barrier = threading.Barrier(8)

        def build() -> NeedsToken:
            barrier.wait()
            return factory.get()

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(lambda _: build(), range(8)))

        assert inspector.inspections == 1
        assert inspector.resolutions == 8
        assert sorted(result.token for result in results) == list(range(1, 9))


class TestConcurrentContext:
    def test_concurrent_registration_and_lookup(self, empty_context: ResolutionContext) -> None:
        """Registries tolerate concurrent writers and readers."""
        errors: list[Exception] = []
        instances = [Registered() for _ in range(50)]

        def register(index: int) -> None:
            try:
                empty_context.register_bean(Registered, instances[index], f"registered{index}")
                assert empty_context.find_bean_by_type(Registered) is not None
            except Exception as e:  # noqa: BLE001
                errors.append(e)

        threads = [threading.Thread(target=register, args=(index,)) for index in range(50)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not errors
        for index, instance in enumerate(instances):
            assert empty_context.find_bean_by_name(f"registered{index}", Registered) is instance

    def test_concurrent_builds_of_distinct_types(self, empty_context: ResolutionContext) -> None:
        """Parallel builds of unrelated types all succeed."""
        types: list[type[Any]] = [type(f"Bean{index}", (), {}) for index in range(20)]

        with ThreadPoolExecutor(max_workers=8) as executor:
            built = list(executor.map(empty_context.require_bean, types))

        assert [type(bean) for bean in built] == types
        assert all(empty_context.find_bean_by_type(bean_type) is not None for bean_type in types)
