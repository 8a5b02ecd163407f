"""Interactive plotly view of the ranked fits, used by the Streamlit app."""

import numpy as np
import plotly.graph_objects as go
import seaborn as sns
from plotly.subplots import make_subplots


def _hex_colors(n):
    return [f'#{int(r*255):02x}{int(g*255):02x}{int(b*255):02x}' for r, g, b in sns.color_palette("husl", n)]


def plot_ranked_fits_plotly(values, fits, num_distributions=5, n_bins=50, title=None):
    """
    Plot a density histogram with the PDFs of the top fits, plus the empirical
    exceedance curve (1 - CDF) on a secondary axis.

    ``fits`` holds FitResults or CandidateDistributions, best first. The best
    fit gets dotted P10/P50/P90 markers.
    """
    values = np.asarray(values, dtype=float)
    sorted_data = np.sort(values)
    n = len(sorted_data)
    x_min, x_max = sorted_data[0], sorted_data[-1]
    x_plot = np.linspace(x_min, x_max, 500)

    fig = make_subplots(specs=[[{"secondary_y": True}]])

    hist_counts, hist_bins = np.histogram(values, bins=max(n_bins, 1), density=True)
    hist_centers = (hist_bins[:-1] + hist_bins[1:]) / 2
    fig.add_trace(
        go.Bar(
            x=hist_centers,
            y=hist_counts,
            width=(hist_bins[1] - hist_bins[0]) * 0.9,
            name='Empirical Histogram (density)',
            marker_color='coral',
            opacity=0.4,
        ),
        secondary_y=False,
    )

    fig.add_trace(
        go.Scatter(
            x=sorted_data,
            y=1 - np.arange(1, n + 1) / n,
            mode='markers',
            name='Empirical 1 - CDF',
            marker=dict(color='red', size=4, opacity=0.5),
            hovertemplate='<b>Value:</b> %{x:.4f}<br><b>Exceedance:</b> %{y:.2%}<extra></extra>',
        ),
        secondary_y=True,
    )

    fits = list(fits)[:num_distributions]
    colors = _hex_colors(max(len(fits), 1))
    dash_styles = ['solid', 'dash', 'dot', 'dashdot', 'longdash', 'longdashdot']

    for idx, fit in enumerate(fits):
        candidate = getattr(fit, 'candidate', fit)
        label = f"#{idx + 1} {candidate.label}"
        if hasattr(fit, 'chi_square'):
            label += f" (χ²={fit.chi_square:.3f})"
        with np.errstate(all='ignore'):
            pdf_y = np.asarray(candidate.pdf(x_plot), dtype=float)
        finite = np.isfinite(pdf_y)
        fig.add_trace(
            go.Scatter(
                x=x_plot[finite],
                y=pdf_y[finite],
                mode='lines',
                name=label,
                line=dict(color=colors[idx], dash=dash_styles[idx % len(dash_styles)], width=max(1.0, 3 - idx * 0.5)),
            ),
            secondary_y=False,
        )
        if idx == 0:
            for q, dash in ((0.10, 'dot'), (0.50, 'dash'), (0.90, 'dot')):
                x_q = float(candidate.ppf(q))
                if np.isfinite(x_q):
                    fig.add_vline(x=x_q, line_dash=dash, line_color=colors[0], opacity=0.6,
                                  annotation_text=f"P{int(q * 100)}", annotation_position="top")

    fig.update_xaxes(title_text="Value", range=[x_min, x_max])
    fig.update_yaxes(title_text="Density", secondary_y=False)
    fig.update_yaxes(title_text="1 - Cumulative Probability", range=[0, 1], secondary_y=True)
    fig.update_layout(
        title=title or f'Top {len(fits)} Fitted Distributions (Interactive)',
        hovermode='closest',
        height=600,
        showlegend=True,
    )
    return fig
