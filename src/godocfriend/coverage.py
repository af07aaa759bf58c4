"""Documentation coverage statistics for a Package.

Every documentable entity contributes one ratio: the word count of its doc
comment divided by an "ideal" word count for its kind, clamped to 1.0. The
ideal counts are subjective; they only need to be the same for every run.
"""

import re
import statistics

from godocfriend.models import Package, Rollup

# Ideal number of words per struct declaration.
IDEAL_WORD_COUNT_STRUCT = 15.0

# Ideal number of words used to describe struct fields.
IDEAL_WORD_COUNT_STRUCT_FIELD = 10.0

# Ideal number of words used to describe package variables.
IDEAL_WORD_COUNT_VAR = 8.0

# Ideal number of words used to describe functions and methods.
IDEAL_WORD_COUNT_FUNC = 10.0

_WORD_SPLIT = re.compile(r"\s+")


def word_count(text: str) -> int:
    """Count the whitespace-separated words of a comment."""
    return len([word for word in _WORD_SPLIT.split(text) if word])


def coverage_ratio(text: str, ideal: float) -> float:
    """Return the comment's word count over the ideal count, at most 1.0."""
    return min(1.0, word_count(text) / ideal)


def collect_ratios(package: Package) -> list[float]:
    """Gather the coverage ratios of every documentable entity in a package.

    Struct types, their fields, every method (type-owned or package-level)
    and every variable contribute. Constants, tests and examples do not.
    """
    type_ratios = []
    field_ratios = []
    func_ratios = []
    var_ratios = []

    for name in sorted(package.types):
        typ = package.types[name]
        if typ.meta_kind == "struct":
            type_ratios.append(coverage_ratio(typ.comment, IDEAL_WORD_COUNT_STRUCT))
        for method in typ.methods:
            func_ratios.append(coverage_ratio(method.comment, IDEAL_WORD_COUNT_FUNC))
        for fld in typ.fields:
            field_ratios.append(coverage_ratio(fld.comment, IDEAL_WORD_COUNT_STRUCT_FIELD))

    for function in package.functions:
        func_ratios.append(coverage_ratio(function.comment, IDEAL_WORD_COUNT_FUNC))

    for variable in package.variables:
        var_ratios.append(coverage_ratio(variable.comment, IDEAL_WORD_COUNT_VAR))

    return type_ratios + field_ratios + func_ratios + var_ratios


def comment_word_count(package: Package) -> int:
    """Total words across all doc comments counted for coverage, plus the synopsis."""
    total = 0
    for typ in package.types.values():
        total += word_count(typ.comment)
        total += sum(word_count(method.comment) for method in typ.methods)
        total += sum(word_count(fld.comment) for fld in typ.fields)
    total += sum(word_count(function.comment) for function in package.functions)
    total += sum(word_count(variable.comment) for variable in package.variables)
    total += word_count(package.synopsis)
    return total


def rollup(samples: list[float]) -> Rollup:
    """Summarize a sample set; statistics undefined for it are reported as 0.0.

    Args:
        samples: Coverage ratios

    Returns:
        Rollup with mean, population standard deviation, geometric and
        harmonic means, median, minimum and maximum
    """
    result = Rollup()
    if not samples:
        return result

    result.mean = statistics.fmean(samples)
    result.std_dev = statistics.pstdev(samples)
    result.median = statistics.median(samples)
    result.minimum = min(samples)
    result.maximum = max(samples)

    # both means are only defined over strictly positive samples
    if all(sample > 0 for sample in samples):
        result.geometric_mean = statistics.geometric_mean(samples)
        result.harmonic_mean = statistics.harmonic_mean(samples)

    return result


def recalc_totals(package: Package) -> Package:
    """Recompute a package's comment word count and coverage rollup in place.

    The result depends only on the package's current types, functions,
    variables and synopsis, so calling this again yields identical values.
    """
    package.comment_word_count = comment_word_count(package)
    package.statistics = rollup(collect_ratios(package))
    return package
