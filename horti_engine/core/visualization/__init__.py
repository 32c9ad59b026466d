"""Plotly figure builders for design results."""

from .plots import (
    cash_flow_figure,
    circuit_layout_figure,
    cost_comparison_figure,
    ppfd_heatmap_figure,
)

__all__ = [
    "cash_flow_figure",
    "circuit_layout_figure",
    "cost_comparison_figure",
    "ppfd_heatmap_figure",
]
