"""Core value types: random sources, generators, shrinkers, properties and reports."""

from propcheck.core import arbitrary, gen, shrink
from propcheck.core.arbitrary import Arbitrary, ArbitraryRegistry, SupportsGeneration, SupportsShrinking
from propcheck.core.gen import Gen
from propcheck.core.outcome import Binding, Outcome, OutcomeKind, conjunction, disjunction
from propcheck.core.property import (
    EvalContext,
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
from propcheck.core.random import RandomSource, fresh_seed
from propcheck.core.result import Report, Verdict

__all__ = [
    "arbitrary",
    "gen",
    "shrink",
    # Random
    "RandomSource",
    "fresh_seed",
    # Generation
    "Gen",
    "Arbitrary",
    "ArbitraryRegistry",
    "SupportsGeneration",
    "SupportsShrinking",
    # Evaluation
    "Binding",
    "Outcome",
    "OutcomeKind",
    "conjunction",
    "disjunction",
    "EvalContext",
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
    # Results
    "Report",
    "Verdict",
]
