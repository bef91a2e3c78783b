"""Calculator validity timeline."""

from __future__ import annotations

from typing import Any

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go


def validity_frame(records: list[dict[str, Any]]) -> pd.DataFrame:
    """Calculators with parseable validity dates; others are skipped."""
    columns = ["Calculator", "Customer", "Valid from", "Valid to", "Window"]
    if not records:
        return pd.DataFrame(columns=columns)
    df = pd.DataFrame(records)
    for col in ("customerName", "quoteNumber", "validFrom", "validTo"):
        if col not in df.columns:
            df[col] = ""
    start = pd.to_datetime(df["validFrom"], errors="coerce", format="%Y-%m-%d")
    end = pd.to_datetime(df["validTo"], errors="coerce", format="%Y-%m-%d")
    out = pd.DataFrame(
        {
            "Calculator": df["quoteNumber"].fillna("").astype(str),
            "Customer": df["customerName"].fillna("").astype(str),
            "Valid from": start,
            "Valid to": end,
        }
    )
    out = out[out["Valid from"].notna() & out["Valid to"].notna()].copy()
    out["Window"] = ["ok" if s <= e else "inverted" for s, e in zip(out["Valid from"], out["Valid to"])]
    return out.reset_index(drop=True)[columns]


def build_validity_timeline(records: list[dict[str, Any]]) -> go.Figure | None:
    df = validity_frame(records)
    if df.empty:
        return None
    # Inverted windows are drawn with swapped ends so the bar stays visible.
    plot_df = df.copy()
    plot_df["Start"] = plot_df[["Valid from", "Valid to"]].min(axis=1)
    plot_df["End"] = plot_df[["Valid from", "Valid to"]].max(axis=1)
    fig = px.timeline(
        plot_df,
        x_start="Start",
        x_end="End",
        y="Calculator",
        color="Window",
        hover_data={"Customer": True, "Valid from": True, "Valid to": True},
        color_discrete_map={"ok": "#19A6FF", "inverted": "#ef4444"},
        title="Calculator validity",
    )
    fig.update_yaxes(autorange="reversed", title=None)
    fig.update_layout(height=max(220, 60 + 40 * len(plot_df)), margin=dict(l=10, r=10, t=50, b=10))
    return fig
