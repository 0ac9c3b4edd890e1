# demandscope/plots/core/theme.py
from __future__ import annotations
from typing import Dict, Any

THEMES: Dict[str, Dict[str, Any]] = {
    # =====================================================
    # DEFAULT (light dashboard card)
    # =====================================================
    "fa": {
        "font": "system-ui, sans-serif",
        "font_size": 12,
        "background": "white",
        "grid_color": "#E7E9EF",
        "axis_color": "#374151",
        "muted_color": "#6b7280",

        "title_color": "#111827",
        "subtitle_color": "#444444",

        "tooltip_bg": "rgba(10,10,22,0.92)",
        "tooltip_border": "rgba(255,255,255,0.2)",
        "tooltip_font_color": "#e2e8f0",
        "separator_color": "white",

        "legend_bg": "rgba(255,255,255,0.80)",
        "legend_border": "rgba(180,180,180,0.35)",
        "legend_font_color": "#222222",
        "legend_font_size": 11,
    },

    # =====================================================
    # DARK THEME (sunburst canvas)
    # =====================================================
    "dark": {
        "font": "system-ui, sans-serif",
        "font_size": 12,
        "background": "#0b0b0b",
        "grid_color": "#333333",
        "axis_color": "#94a3b8",
        "muted_color": "#64748b",

        "title_color": "#dde3ed",
        "subtitle_color": "#CCCCCC",

        "tooltip_bg": "rgba(5,5,15,0.88)",
        "tooltip_border": "rgba(255,255,255,0.18)",
        "tooltip_font_color": "#cbd5e1",
        "separator_color": "#0b0b0b",
        "hub_color": "#17112e",

        "legend_bg": "rgba(20,20,20,0.75)",
        "legend_border": "rgba(255,255,255,0.25)",
        "legend_font_color": "#F0F0F0",
        "legend_font_size": 11,
    },

    # =====================================================
    # MINIMALIST
    # =====================================================
    "minimal": {
        "font": "Inter",
        "font_size": 12,
        "background": "white",
        "grid_color": "rgba(0,0,0,0.07)",
        "axis_color": "#444444",
        "muted_color": "#666666",

        "title_color": "#222222",
        "subtitle_color": "#666666",

        "tooltip_bg": "rgba(255,255,255,0.95)",
        "tooltip_border": "rgba(210,210,210,0.6)",
        "tooltip_font_color": "#333333",
        "separator_color": "white",

        "legend_bg": "rgba(255,255,255,0.55)",
        "legend_border": "rgba(210,210,210,0.20)",
        "legend_font_color": "#333333",
        "legend_font_size": 11,
    },
}


def get_theme(theme: str = "fa") -> Dict[str, Any]:
    return THEMES.get(theme, THEMES["fa"])


def apply_theme(fig, theme: str = "fa"):
    """Apply global demandscope theme to a Plotly figure."""
    t = get_theme(theme)

    fig.update_layout(
        font=dict(family=t["font"], size=t["font_size"], color=t["axis_color"]),
        plot_bgcolor=t["background"],
        paper_bgcolor=t["background"],
        hoverlabel=dict(
            bgcolor=t["tooltip_bg"],
            bordercolor=t["tooltip_border"],
            font=dict(family=t["font"], size=10, color=t["tooltip_font_color"]),
        ),
    )

    fig.update_xaxes(
        gridcolor=t["grid_color"],
        color=t["axis_color"],
        tickcolor=t["axis_color"],
    )

    fig.update_yaxes(
        gridcolor=t["grid_color"],
        color=t["axis_color"],
        tickcolor=t["axis_color"],
    )

    return fig


def apply_legend(fig, theme: str = "fa", visible: bool = True):
    """Apply the translucent top-right legend, or hide it."""
    t = get_theme(theme)

    if not visible:
        fig.update_layout(showlegend=False)
        return fig

    legend_font_color = t.get("legend_font_color", t.get("axis_color", "#222"))
    legend_font_size = t.get("legend_font_size", 12)

    fig.update_layout(
        showlegend=True,
        legend=dict(
            bgcolor=t.get("legend_bg", "rgba(255,255,255,0.65)"),
            bordercolor=t.get("legend_border", "rgba(200,200,200,0.4)"),
            borderwidth=1,
            font=dict(size=legend_font_size, color=legend_font_color),
            x=1.0, y=1.12,
            xanchor="right", yanchor="top",
            orientation="h",
        )
    )

    return fig


def hide_axes(fig, width: float, height: float):
    """Pin both axes to a pixel-like canvas (y grows downward) and hide them."""
    fig.update_xaxes(
        range=[0, width], visible=False, showgrid=False, zeroline=False, fixedrange=True,
    )
    fig.update_yaxes(
        range=[height, 0], visible=False, showgrid=False, zeroline=False, fixedrange=True,
        scaleanchor="x", scaleratio=1,
    )
    fig.update_layout(margin=dict(l=0, r=0, t=30, b=0))
    return fig
