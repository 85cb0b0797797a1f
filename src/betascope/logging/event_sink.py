"""JSONL event sink, aligned-dataset audit file and Plotly beta report."""

from __future__ import annotations

import html
import json
from pathlib import Path

import pandas as pd
import plotly.express as px

from betascope.analytics.pipeline import INDEX_COLUMN, asset_column
from betascope.domain.events import RunEvent
from betascope.domain.models import AlignedDataset, BetaReport


class JsonlEventSink:
    """Append-only JSONL writer."""

    def __init__(self, path: str) -> None:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.path = output_path

    def emit(self, event: RunEvent) -> None:
        record = event.to_record()
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, sort_keys=True, default=str))
            handle.write("\n")


def write_aligned_csv(dataset: AlignedDataset, path: str | Path) -> Path:
    """Write the aligned return rows used by the regressions."""
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    frame = dataset.to_frame().reset_index()
    frame["date"] = frame["date"].dt.strftime("%Y-%m-%d")
    frame.to_csv(output, index=False)
    return output


def generate_plotly_report(
    report: BetaReport,
    output_html_path: str,
    asset_symbol: str,
    index_symbol: str,
) -> None:
    """Render per-channel scatter plots with fitted lines and a beta summary."""
    output = Path(output_html_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    frame = report.dataset.to_frame()

    html_parts = [
        "<html><head><meta charset='utf-8'>"
        f"<title>{asset_symbol} vs {index_symbol} betas</title></head><body>",
    ]
    include_plotlyjs: str | bool = "cdn"
    for channel, result in report.results.items():
        figure = px.scatter(
            frame,
            x=INDEX_COLUMN,
            y=asset_column(channel),
            title=f"{asset_symbol} {channel} vs {index_symbol} close (beta {result.beta:.4f})",
            labels={
                INDEX_COLUMN: f"{index_symbol} close return",
                asset_column(channel): f"{asset_symbol} {channel} return",
            },
        )
        x_range = [float(frame[INDEX_COLUMN].min()), float(frame[INDEX_COLUMN].max())]
        figure.add_scatter(
            x=x_range,
            y=[result.intercept + result.beta * value for value in x_range],
            mode="lines",
            name="OLS fit",
        )
        html_parts.append(figure.to_html(full_html=False, include_plotlyjs=include_plotlyjs))
        include_plotlyjs = False

    if report.results:
        summary = pd.DataFrame(
            [
                {
                    "channel": channel,
                    "beta": result.beta,
                    "upper": result.ci_upper - result.beta,
                    "lower": result.beta - result.ci_lower,
                }
                for channel, result in report.results.items()
            ]
        )
        bars = px.bar(
            summary,
            x="channel",
            y="beta",
            error_y="upper",
            error_y_minus="lower",
            title=f"{asset_symbol} betas vs {index_symbol}",
        )
        html_parts.append(bars.to_html(full_html=False, include_plotlyjs=include_plotlyjs))

    # Failed channels have no estimate to plot.
    if report.failures:
        items = "".join(
            f"<li>{html.escape(channel)}: {html.escape(str(failure))}</li>"
            for channel, failure in report.failures.items()
        )
        html_parts.append(f"<h3>Failed regressions</h3><ul class='failed'>{items}</ul>")
    html_parts.append("</body></html>")
    output.write_text("".join(html_parts), encoding="utf-8")
