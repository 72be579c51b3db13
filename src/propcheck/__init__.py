"""propcheck - property-based testing with composable generators and shrinking.

Example:
    >>> from propcheck import arbitrary as arb, check, for_all
    >>> prop = for_all(arb.lists(arb.integers()))(lambda xs: list(reversed(list(reversed(xs)))) == xs)
    >>> check(prop, seed=42).passed
    True
"""

__version__ = "0.1.0"

from propcheck.config import CheckConfig, load_config
from propcheck.core import arbitrary, gen, shrink
from propcheck.core.arbitrary import Arbitrary, ArbitraryRegistry, SupportsGeneration, SupportsShrinking
from propcheck.core.gen import Gen
from propcheck.core.outcome import Outcome, OutcomeKind
from propcheck.core.property import (
    Property,
    as_property,
    classify,
    collect,
    conjoin,
    counterexample,
    disjoin,
    for_all,
    implies,
    label,
)
from propcheck.core.random import RandomSource
from propcheck.core.result import Report, Verdict
from propcheck.decorators import PropertySuite, property_test
from propcheck.errors import (
    ConfigValidationError,
    GenerationExhausted,
    InvalidRange,
    MalformedWeights,
    MissingArbitrary,
    PropCheckError,
    PropertyFalsified,
    PropertyGaveUp,
)
from propcheck.runner import Driver, check, run_suite

__all__ = [
    "__version__",
    # Modules
    "arbitrary",
    "gen",
    "shrink",
    # Configuration
    "CheckConfig",
    "load_config",
    # Generation
    "RandomSource",
    "Gen",
    "Arbitrary",
    "ArbitraryRegistry",
    "SupportsGeneration",
    "SupportsShrinking",
    # Properties
    "Outcome",
    "OutcomeKind",
    "Property",
    "as_property",
    "for_all",
    "implies",
    "label",
    "classify",
    "collect",
    "counterexample",
    "conjoin",
    "disjoin",
    # Running
    "Driver",
    "check",
    "run_suite",
    "Report",
    "Verdict",
    "PropertySuite",
    "property_test",
    # Errors
    "PropCheckError",
    "GenerationExhausted",
    "MalformedWeights",
    "InvalidRange",
    "MissingArbitrary",
    "ConfigValidationError",
    "PropertyFalsified",
    "PropertyGaveUp",
]
