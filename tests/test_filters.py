import pandas as pd
import pytest

from findash.data.schemas import ActiveTab, FilterSelection, transactions_to_frame
from findash.filters.selection import (
    FilterEngine, apply_filters, prune_categories, reachable_categories,
)


@pytest.fixture
def two_type_df(make_tx):
    return transactions_to_frame([
        make_tx("2024-01-01", -10.0, "A", "X"),
        make_tx("2024-01-02", -20.0, "A", "Shared"),
        make_tx("2024-01-03", 30.0, "B", "C"),
        make_tx("2023-05-05", 40.0, "B", "Shared"),
    ])


# ---------------------------------------------------------------------------
# FilterSelection
# ---------------------------------------------------------------------------

def test_selection_toggle_returns_new_value():
    empty = FilterSelection()
    with_year = empty.toggle("years", 2024)

    assert empty.is_empty
    assert with_year.years == {2024}
    assert with_year.toggle("years", 2024) == empty


def test_selection_rejects_unknown_dimension():
    with pytest.raises(ValueError):
        FilterSelection().toggle("entities", "Banco A")


def test_selection_to_dict_is_sorted():
    sel = FilterSelection.of([2022, 2024], ["Ingresos", "Gastos"], [])
    assert sel.to_dict() == {"years": [2022, 2024], "types": ["Gastos", "Ingresos"], "categories": []}


# ---------------------------------------------------------------------------
# Visible set
# ---------------------------------------------------------------------------

def test_empty_selection_shows_everything(sample_df):
    assert len(apply_filters(sample_df, FilterSelection())) == len(sample_df)


def test_or_within_and_across_dimensions(sample_df):
    sel = FilterSelection.of(years=[2023, 2024], types=["Gastos"], categories=["Supermercado", "Restaurantes"])
    visible = apply_filters(sample_df, sel)

    assert set(visible["concept"]) == {
        "MERCADONA VALENCIA", "BAR MANOLO", "Mercadona Ruzafa", "RESTAURANTE EL PUERTO",
    }
    assert len(visible) == 5
    assert visible["year"].isin([2023, 2024]).all()
    assert (visible["operation_type"] == "Gastos").all()


def test_exploration_applies_only_years(sample_df):
    sel = FilterSelection.of(years=[2024], types=["Ingresos"], categories=["Nómina"])

    overview = apply_filters(sample_df, sel, ActiveTab.OVERVIEW)
    exploration = apply_filters(sample_df, sel, ActiveTab.EXPLORATION)

    assert list(overview["concept"]) == ["NOMINA ACME SL"]
    assert len(exploration) == 4
    assert (exploration["year"] == 2024).all()


def test_filtering_does_not_mutate_input(sample_df):
    before = sample_df.copy()
    apply_filters(sample_df, FilterSelection.of(types=["Gastos"]))
    pd.testing.assert_frame_equal(sample_df, before)


# ---------------------------------------------------------------------------
# Cross-filter consistency
# ---------------------------------------------------------------------------

def test_reachable_categories(two_type_df):
    assert reachable_categories(two_type_df, ["A"]) == {"X", "Shared"}
    assert reachable_categories(two_type_df, ["A", "B"]) == {"X", "Shared", "C"}
    assert reachable_categories(two_type_df, []) == set()


def test_prune_is_a_noop_when_consistent(two_type_df):
    no_types = FilterSelection.of(categories=["C"])
    consistent = FilterSelection.of(types=["A"], categories=["Shared"])

    assert prune_categories(two_type_df, no_types) is no_types
    assert prune_categories(two_type_df, consistent) is consistent


def test_prune_drops_only_unreachable(two_type_df):
    sel = FilterSelection.of(types=["A"], categories=["C", "Shared"])
    assert prune_categories(two_type_df, sel).categories == {"Shared"}


def test_category_retained_then_pruned_as_types_change(two_type_df):
    engine = FilterEngine(two_type_df)
    engine.set_types(["A"])
    engine.toggle_category("C")
    assert engine.selection.categories == {"C"}

    engine.set_types(["A", "B"])
    assert engine.selection.categories == {"C"}

    engine.set_types(["A"])
    assert engine.selection.categories == frozenset()


def test_toggle_type_revalidates(two_type_df):
    engine = FilterEngine(two_type_df, FilterSelection.of(types=["B"], categories=["C"]))
    engine.toggle_type("A")
    assert engine.selection.categories == {"C"}
    engine.toggle_type("B")
    assert engine.selection.types == {"A"}
    assert engine.selection.categories == frozenset()


def test_data_change_revalidates(two_type_df):
    engine = FilterEngine(two_type_df, FilterSelection.of(types=["A", "B"], categories=["C"]))
    engine.set_data(two_type_df[two_type_df["category"] != "C"])
    assert engine.selection.categories == frozenset()


def test_engine_keeps_initial_selection(two_type_df):
    engine = FilterEngine(two_type_df, FilterSelection.of(types=["A"], categories=["C", "X"]))
    assert engine.selection.categories == {"C", "X"}


def test_set_selection_prunes_only_when_types_change(two_type_df):
    engine = FilterEngine(two_type_df, FilterSelection.of(types=["A"]))

    engine.set_selection(FilterSelection.of(years=[2024], types=["A"], categories=["C"]))
    assert engine.selection.categories == {"C"}

    engine.set_selection(FilterSelection.of(types=["A", "B"], categories=["C", "Other"]))
    assert engine.selection.categories == {"C"}


def test_unreachable_category_shows_nothing(sample_df):
    engine = FilterEngine(sample_df)
    engine.toggle_type("Gastos")
    engine.toggle_category("Nómina")

    assert engine.selection.categories == {"Nómina"}
    assert engine.visible().empty


def test_engine_visible_follows_tab(two_type_df):
    engine = FilterEngine(two_type_df, FilterSelection.of(years=[2024], types=["A"]))
    assert len(engine.visible()) == 2

    engine.set_tab("exploration")
    assert engine.active_tab == ActiveTab.EXPLORATION
    assert len(engine.visible()) == 3

    engine.toggle_year(2024)
    assert len(engine.visible()) == 4

    engine.clear()
    assert engine.selection.is_empty
