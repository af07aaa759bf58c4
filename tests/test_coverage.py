import pytest

from godocfriend.coverage import (
    IDEAL_WORD_COUNT_FUNC,
    collect_ratios,
    comment_word_count,
    coverage_ratio,
    recalc_totals,
    rollup,
    word_count,
)
from godocfriend.models import Field, Method, Package, Rollup, Type, Value


def _documented_package() -> Package:
    package = Package(name="demo", synopsis="Package demo does things.")
    widget = package.types.find_or_create("Widget")
    widget.comment = "Widget is a thing that spins around and around forever."
    widget.fields.append(Field(name="Size", type="int", comment="Size in millimeters."))
    widget.add_method(Method(name="Spin", comment="Spin spins the widget exactly once around its axis and then stops."))
    package.types.merge(Type(name="ID", meta_kind="string", comment="ID identifies."))
    package.functions.append(Method(name="Run", comment=""))
    package.variables.append(Value(name="Default", comment="Default widget."))
    package.constants.append(Value(name="Version", immutable=True, comment="Version is ignored here."))
    return package


def test_word_count():
    assert word_count("") == 0
    assert word_count("  one\ttwo\nthree  ") == 3


def test_coverage_ratio_is_clamped():
    long_comment = " ".join(["word"] * 40)

    assert coverage_ratio(long_comment, IDEAL_WORD_COUNT_FUNC) == 1.0
    assert coverage_ratio("one two", IDEAL_WORD_COUNT_FUNC) == pytest.approx(0.2)
    assert coverage_ratio("", IDEAL_WORD_COUNT_FUNC) == 0.0


def test_collect_ratios_counts_documentable_entities():
    ratios = collect_ratios(_documented_package())

    # Widget struct, Size field, Spin method, Run function, Default variable;
    # the non-struct ID type and the constant do not contribute
    assert len(ratios) == 5
    assert all(0.0 <= ratio <= 1.0 for ratio in ratios)


def test_comment_word_count_includes_synopsis():
    package = Package(name="demo", synopsis="Package demo does things.")

    assert comment_word_count(package) == 4

    package.functions.append(Method(name="Run", comment="Run it now."))
    assert comment_word_count(package) == 7


def test_rollup_of_empty_samples_is_zero():
    assert rollup([]) == Rollup()


def test_rollup_statistics():
    result = rollup([0.5, 1.0])

    assert result.mean == pytest.approx(0.75)
    assert result.std_dev == pytest.approx(0.25)
    assert result.median == pytest.approx(0.75)
    assert result.minimum == 0.5
    assert result.maximum == 1.0
    assert result.geometric_mean == pytest.approx(0.5 ** 0.5)
    assert result.harmonic_mean == pytest.approx(2 / 3)


def test_rollup_with_zero_sample_has_zero_means():
    result = rollup([0.0, 1.0])

    assert result.mean == pytest.approx(0.5)
    assert result.geometric_mean == 0.0
    assert result.harmonic_mean == 0.0


def test_recalc_totals_is_repeatable():
    package = _documented_package()

    recalc_totals(package)
    first = (package.comment_word_count, package.statistics)
    recalc_totals(package)

    assert (package.comment_word_count, package.statistics) == first
    assert package.statistics.maximum == 1.0
    assert package.statistics.minimum == 0.0
