"""Glue between properties and test runners.

``@property_test`` turns a property body into a plain zero-argument test
function that pytest (or any runner that treats ``AssertionError`` as a
failure) can collect::

    @property_test(arb.lists(arb.integers()))
    def test_reverse_twice(xs):
        assert list(reversed(list(reversed(xs)))) == xs

    @property_test()
    def test_addition_commutes(a: int, b: int):
        return a + b == b + a

``PropertySuite`` groups named properties so the CLI can discover them::

    suite = PropertySuite("lists")

    @suite.property(arb.lists(arb.integers()))
    def sort_idempotent(xs):
        return sorted(sorted(xs)) == sorted(xs)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any

from propcheck.config.settings import CheckConfig
from propcheck.core.arbitrary import ArbitraryRegistry
from propcheck.core.property import ArgumentSpec, Property, Testable, as_property, for_all
from propcheck.core.result import Verdict
from propcheck.errors import DefinitionError, PropertyFalsified, PropertyGaveUp, PropertyNotFound
from propcheck.runner.driver import check
from propcheck.runner.suite import SuiteResult, run_suite

logger = logging.getLogger(__name__)


def _build(
    fn: Callable[..., Any],
    arguments: tuple[ArgumentSpec, ...],
    registry: ArbitraryRegistry | None,
    name: str | None,
) -> Property:
    if arguments:
        return for_all(*arguments, body=fn, registry=registry, name=name or fn.__name__)
    return Property.from_function(fn, registry, name=name)


def property_test(
    *arguments: ArgumentSpec,
    registry: ArbitraryRegistry | None = None,
    config: CheckConfig | None = None,
    name: str | None = None,
    **overrides: Any,
) -> Callable[[Callable[..., Any]], Callable[[], None]]:
    """Turn a property body into a zero-argument test function.

    Arguments are taken from ``arguments`` when given, otherwise from the
    body's type annotations via ``registry``. Keyword overrides
    (``seed=...``, ``max_tests=...``) apply on top of ``config``.

    The returned function raises PropertyFalsified or PropertyGaveUp
    (both ``AssertionError`` subclasses) and exposes the underlying
    Property as ``.property``.
    """

    def decorate(fn: Callable[..., Any]) -> Callable[[], None]:
        prop = _build(fn, arguments, registry, name)

        def test() -> None:
            report = check(prop, config, name=prop.description, **overrides)
            if report.verdict is Verdict.FALSIFIED:
                raise PropertyFalsified(report)
            if report.verdict is Verdict.GAVE_UP:
                raise PropertyGaveUp(report)

        # Copy identity but not the signature: pytest must see zero parameters.
        test.__name__ = fn.__name__
        test.__qualname__ = fn.__qualname__
        test.__module__ = fn.__module__
        test.__doc__ = fn.__doc__
        test.property = prop  # type: ignore[attr-defined]
        return test

    return decorate


class PropertySuite:
    """An ordered collection of named properties.

    Args:
        name: Suite name, used by reporters as the test-suite name.
        registry: Registry used to resolve annotated or type arguments.
    """

    def __init__(self, name: str = "propcheck", registry: ArbitraryRegistry | None = None) -> None:
        self.name = name
        self.registry = registry
        self._properties: dict[str, Property] = {}

    def __len__(self) -> int:
        return len(self._properties)

    def __iter__(self) -> Iterator[tuple[str, Property]]:
        return iter(self._properties.items())

    def __contains__(self, name: str) -> bool:
        return name in self._properties

    @property
    def names(self) -> list[str]:
        return list(self._properties)

    def add(self, name: str, testable: Testable) -> Property:
        """Register ``testable`` under ``name``.

        Raises:
            DefinitionError: If the name is already taken.
        """
        if name in self._properties:
            raise DefinitionError(f"Property {name!r} is already registered in suite {self.name!r}")
        prop = as_property(testable)
        self._properties[name] = prop
        logger.debug(f"Registered property {name}", extra={"structured_data": {"suite": self.name}})
        return prop

    def property(self, *arguments: ArgumentSpec, name: str | None = None) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator registering a ``for_all`` property; the function itself is returned unchanged."""

        def decorate(fn: Callable[..., Any]) -> Callable[..., Any]:
            prop_name = name or fn.__name__
            self.add(prop_name, _build(fn, arguments, self.registry, prop_name))
            return fn

        return decorate

    def get(self, name: str) -> Property:
        try:
            return self._properties[name]
        except KeyError:
            raise PropertyNotFound(
                f"No property named {name!r} in suite {self.name!r}",
                suggestions=[f"Available: {', '.join(self._properties) or '(none)'}"],
            ) from None

    def run(self, config: CheckConfig | None = None, workers: int | None = None) -> SuiteResult:
        return run_suite(self._properties, config, workers)
