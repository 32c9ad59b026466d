from __future__ import annotations

from horti_engine.core.pipeline import run_design
from horti_engine.core.visualization import (
    cash_flow_figure,
    circuit_layout_figure,
    cost_comparison_figure,
    ppfd_heatmap_figure,
)


def test_figures_built_from_design(bench_spec):
    result = run_design(bench_spec)
    heatmap = ppfd_heatmap_figure(result.grid, result.facility.fixtures, result.metrics)
    assert heatmap.data[0].type == "heatmap"
    assert len(heatmap.data) == 2

    layout = circuit_layout_figure(result.facility.fixtures, result.circuits)
    assert len(layout.data) == len(result.circuits)

    cash = cash_flow_figure(result.financial)
    assert len(cash.data[0].y) == len(result.financial.cash_flow)

    costs = cost_comparison_figure(result.financial)
    assert len(costs.data) == 2


def test_empty_inputs_give_placeholder_figures():
    for figure in (
        ppfd_heatmap_figure(None),
        circuit_layout_figure(None, None),
        cash_flow_figure(None),
        cost_comparison_figure(None),
    ):
        assert len(figure.data) == 0
        assert figure.layout.annotations
