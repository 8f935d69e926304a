from typing import Iterable

import pandas as pd
import plotly.graph_objects as go

from chestnut.dates import format_short_date
from chestnut.domain import WeekSummary
from chestnut.memo import budget_remaining

COLUMNS = ["start_date", "end_date", "total_spent", "budget", "is_over_budget", "remaining"]


def summaries_frame(summaries: Iterable[WeekSummary]) -> pd.DataFrame:
    """Tabular view of week summaries, most recent week first."""
    rows = [
        {
            "start_date": s.start_date,
            "end_date": s.end_date,
            "total_spent": s.total_spent,
            "budget": s.budget,
            "is_over_budget": s.is_over_budget,
            "remaining": budget_remaining(s),
        }
        for s in summaries
    ]
    df = pd.DataFrame(rows, columns=COLUMNS)
    return df.sort_values("start_date", ascending=False).reset_index(drop=True)


def spending_trend_figure(summaries: Iterable[WeekSummary]) -> go.Figure:
    """Weekly spend as bars with the budget as a line, oldest week on the left."""
    df = summaries_frame(summaries).iloc[::-1]
    labels = [format_short_date(d) for d in df["start_date"]]
    colors = ["#d9534f" if over else "#5cb85c" for over in df["is_over_budget"]]

    fig = go.Figure()
    fig.add_trace(go.Bar(x=labels, y=df["total_spent"].tolist(), name="Spent", marker_color=colors))
    fig.add_trace(go.Scatter(x=labels, y=df["budget"].tolist(), mode="lines+markers", name="Budget"))
    fig.update_layout(
        template="plotly_dark",
        margin=dict(t=30, b=10, l=10, r=10),
        yaxis_title="Dollars",
    )
    return fig
