from __future__ import annotations

from typing import Optional, Sequence

import plotly.graph_objects as go
from plotly.subplots import make_subplots

from horti_engine.core.models import Circuit, FinancialScenario, Fixture, LightingMetrics, Payback, PPFDGrid


def _empty_figure(title: str, message: str) -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title=title, template="plotly_white")
    fig.add_annotation(
        text=message,
        x=0.5,
        y=0.5,
        showarrow=False,
        font={"size": 14},
    )
    fig.update_xaxes(visible=False)
    fig.update_yaxes(visible=False)
    return fig


def ppfd_heatmap_figure(
    grid: Optional[PPFDGrid],
    fixtures: Optional[Sequence[Fixture]] = None,
    metrics: Optional[LightingMetrics] = None,
) -> go.Figure:
    if grid is None or grid.cell_count == 0:
        return _empty_figure("PPFD Map", "Run the photometric calculation to view the PPFD map.")

    fig = go.Figure(
        data=[
            go.Heatmap(
                x=grid.xs.tolist(),
                y=grid.ys.tolist(),
                z=grid.to_rows(),
                colorscale="Viridis",
                colorbar={"title": "PPFD (μmol/m²/s)"},
            )
        ]
    )
    if fixtures:
        fig.add_trace(
            go.Scatter(
                x=[f.x for f in fixtures],
                y=[f.y for f in fixtures],
                mode="markers",
                name="Fixtures",
                text=[f.id for f in fixtures],
                marker={"size": 6, "color": "#FFFFFF", "line": {"width": 1, "color": "#333333"}},
            )
        )
    title = "PPFD Map"
    if metrics is not None:
        title = (
            f"PPFD Map | avg {metrics.avg_ppfd:,.0f} μmol/m²/s, "
            f"uniformity {metrics.uniformity:.2f}, DLI {metrics.dli:.1f}"
        )
    fig.update_layout(
        title=title,
        xaxis_title="Length",
        yaxis_title="Width",
        template="plotly_white",
    )
    fig.update_yaxes(scaleanchor="x", scaleratio=1)
    return fig


def circuit_layout_figure(
    fixtures: Optional[Sequence[Fixture]], circuits: Optional[Sequence[Circuit]]
) -> go.Figure:
    if not fixtures or not circuits:
        return _empty_figure("Circuit Layout", "Partition circuits to view the layout.")

    by_id = {f.id: f for f in fixtures}
    fig = go.Figure()
    for circuit in circuits:
        members = [by_id[fid] for fid in circuit.fixture_ids if fid in by_id]
        fig.add_trace(
            go.Scatter(
                x=[f.x for f in members],
                y=[f.y for f in members],
                mode="markers",
                name=f"{circuit.id} ({circuit.phase}, {circuit.breaker_amps:g} A)",
                text=[f.id for f in members],
                marker={"size": 10},
            )
        )
    fig.update_layout(
        title="Lighting Branch Circuits",
        xaxis_title="Length",
        yaxis_title="Width",
        template="plotly_white",
    )
    return fig


def cash_flow_figure(financial: Optional[FinancialScenario]) -> go.Figure:
    if not financial or not financial.cash_flow:
        return _empty_figure("Cumulative Cash Flow", "Run the financial comparison.")

    years = list(range(len(financial.cash_flow)))
    values = list(financial.cash_flow)
    fig = go.Figure(
        data=[
            go.Bar(
                x=years,
                y=values,
                marker_color=["#E45756" if v < 0 else "#59A14F" for v in values],
                name="Cumulative",
            )
        ]
    )
    payback = financial.payback_years
    subtitle = "never breaks even" if payback is Payback.NEVER else f"payback {payback:.1f} years"
    fig.update_layout(
        title=f"Cumulative Cash Flow ({subtitle})",
        xaxis_title="Year",
        yaxis_title="Cumulative savings ($)",
        template="plotly_white",
    )
    return fig


def cost_comparison_figure(financial: Optional[FinancialScenario]) -> go.Figure:
    if not financial:
        return _empty_figure("Annual Cost Comparison", "Run the financial comparison.")

    labels = [financial.baseline.label, financial.proposed.label]
    fig = make_subplots(
        cols=2,
        rows=1,
        column_widths=[0.5, 0.5],
        subplot_titles=("Annual Energy (kWh)", "Annual Operating Cost ($)"),
    )
    fig.add_trace(
        go.Bar(
            x=labels,
            y=[financial.annual_energy_kwh["baseline"], financial.annual_energy_kwh["proposed"]],
            marker_color=["#F6C85F", "#2E86AB"],
        ),
        row=1,
        col=1,
    )
    fig.add_trace(
        go.Bar(
            x=labels,
            y=[
                financial.annual_operating_cost["baseline"],
                financial.annual_operating_cost["proposed"],
            ],
            marker_color=["#F6C85F", "#2E86AB"],
        ),
        row=1,
        col=2,
    )
    fig.update_layout(template="plotly_white", showlegend=False)
    return fig
