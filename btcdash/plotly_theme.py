import plotly.io as pio

THEME_TEXT = "#0F172A"
THEME_GRID = "#E5E7EB"
THEME_BG = "#FFFFFF"


def register_theme(template_name: str = "btcdash") -> str:
    axis = dict(showgrid=True, gridcolor=THEME_GRID, zeroline=False, ticks="outside", tickcolor=THEME_GRID)
    pio.templates[template_name] = dict(
        layout=dict(
            font=dict(family="Inter, system-ui, sans-serif", size=13, color=THEME_TEXT),
            paper_bgcolor=THEME_BG,
            plot_bgcolor=THEME_BG,
            xaxis=axis,
            yaxis=axis,
            colorway=["#F7931A", "#3B82F6", "#8B5CF6", "#FF9900", "#16A34A", "#DC2626"],
        )
    )
    return template_name
