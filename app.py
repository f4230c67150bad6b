"""Asset Distribution Calculator - Streamlit App."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from core.config import DEFAULT_CURVE_CONFIG, DEFAULT_INPUT_BOUNDS, DEFAULT_YEARS
from core.curve import try_generate_distribution_curve
from core.distribution import DistributionModel, calculate_investment_distribution
from core.evaluators import distribution_cdf
from core.exceptions import DataFetchError
from core.market_data import estimate_return_and_risk
from core.percentiles import (
    calculate_worst_case,
    clamp_probability_threshold,
    confidence_interval,
)
from core.portfolio import calculate_total_assets_worst_case
from core.settings import InvestmentSettings, SettingsStore
from core.validation import validate_all
from utils.helpers import format_currency, format_signed_currency, format_signed_percent

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


SETTINGS_PATH = Path("data/settings.json")
CACHE_DIR = Path("data/cache")

MODEL_LABELS = {
    DistributionModel.NORMAL: "Normal approximation",
    DistributionModel.LOGNORMAL: "Lognormal (continuous compounding)",
}

# Settings field -> sidebar widget key
WIDGET_KEYS = {
    "total_assets": "input_total_assets",
    "investment_ratio": "input_investment_ratio",
    "probability_threshold": "input_probability_threshold",
    "expected_return": "input_expected_return",
    "risk": "input_risk",
}

bounds = DEFAULT_INPUT_BOUNDS
store = SettingsStore(SETTINGS_PATH)

st.set_page_config(page_title="Asset Distribution Calculator", layout="wide")

st.title("Asset Distribution Calculator")


def load_initial_settings() -> InvestmentSettings:
    """Saved settings, overridden by any settings present in the URL."""
    saved = store.load()
    url_params = st.query_params.to_dict()
    if not url_params:
        return saved
    merged = {**saved.to_query_params(), **url_params}
    return InvestmentSettings.from_query_params(merged)


def clip(value: float, lower: float, upper: float) -> float:
    return min(max(value, lower), upper)


def seed_widgets(settings: InvestmentSettings) -> None:
    """Give each sidebar widget its starting value once per session."""
    # Widgets reject values outside their range, e.g. from a hand-edited URL
    values = {
        "total_assets": max(settings.total_assets, 0.0),
        "investment_ratio": clip(
            settings.investment_ratio, bounds.min_investment_ratio, bounds.max_investment_ratio
        ),
        "probability_threshold": clamp_probability_threshold(settings.probability_threshold),
        "expected_return": clip(settings.expected_return, -99.9, 100.0),
        "risk": clip(settings.risk, 0.0, 100.0),
    }
    for name, key in WIDGET_KEYS.items():
        st.session_state.setdefault(key, float(values[name]))


if "settings" not in st.session_state:
    st.session_state["settings"] = load_initial_settings()

seed_widgets(st.session_state["settings"])

# =============================================================================
# SIDEBAR INPUTS
# =============================================================================

with st.sidebar:
    with st.expander("Estimate from market history", expanded=False):
        ticker = st.text_input("Ticker", value="SPY", help="Yahoo Finance symbol.")
        if st.button("Fill return and risk"):
            try:
                estimate = estimate_return_and_risk(ticker, CACHE_DIR)
                st.session_state[WIDGET_KEYS["expected_return"]] = clip(
                    round(estimate.expected_return, 1), -99.9, 100.0
                )
                st.session_state[WIDGET_KEYS["risk"]] = clip(round(estimate.risk, 1), 0.0, 100.0)
                st.caption(
                    f"{estimate.ticker}: {estimate.n_months} months "
                    f"({estimate.start_date} to {estimate.end_date})"
                )
            except DataFetchError as e:
                st.error(f"Could not load market data: {e}")
            except Exception as e:
                logger.error(f"Unexpected error estimating from {ticker}: {e}")
                st.error("An error occurred loading market data.")

    st.header("Assets")
    total_assets = st.number_input(
        "Total assets",
        min_value=0.0,
        step=100_000.0,
        format="%.0f",
        key=WIDGET_KEYS["total_assets"],
    )
    investment_ratio = st.slider(
        "Investment ratio (%)",
        min_value=bounds.min_investment_ratio,
        max_value=bounds.max_investment_ratio,
        step=1.0,
        key=WIDGET_KEYS["investment_ratio"],
        help="Share of total assets that is invested.",
    )

    st.header("Risk tolerance")
    probability_threshold = st.number_input(
        "Probability threshold (%)",
        min_value=bounds.min_probability_threshold,
        max_value=bounds.max_probability_threshold,
        step=bounds.probability_threshold_step,
        key=WIDGET_KEYS["probability_threshold"],
        help="Worst case considered: only the remaining share of outcomes end lower.",
    )

    st.header("Market assumptions")
    expected_return = st.number_input(
        "Expected return (% / year)",
        min_value=-99.9,
        max_value=100.0,
        step=0.1,
        key=WIDGET_KEYS["expected_return"],
    )
    risk = st.number_input(
        "Risk (% / year)",
        min_value=0.0,
        max_value=100.0,
        step=0.1,
        key=WIDGET_KEYS["risk"],
        help="Annual volatility (standard deviation of returns).",
    )

    if st.button("Reset settings"):
        store.reset()
        st.query_params.clear()
        for key in WIDGET_KEYS.values():
            st.session_state.pop(key, None)
        st.session_state.pop("settings", None)
        logger.info("Settings reset to defaults")
        st.rerun()

# Saved on every change, mirrored to the URL so the page can be shared
settings = InvestmentSettings(
    total_assets=total_assets,
    investment_ratio=investment_ratio,
    probability_threshold=probability_threshold,
    expected_return=expected_return,
    risk=risk,
)
if settings != st.session_state["settings"]:
    store.save(settings)
    st.session_state["settings"] = settings
st.query_params.from_dict(settings.to_query_params())

# =============================================================================
# SCENARIO CONTROLS
# =============================================================================

control_cols = st.columns(2)
with control_cols[0]:
    model = st.radio(
        "Distribution model",
        options=list(DistributionModel),
        format_func=lambda m: MODEL_LABELS[m],
        horizontal=True,
        help="Normal: discrete compounding, clipped at zero. "
        "Lognormal: continuous compounding, never negative.",
    )
    years = st.slider(
        "Holding period (years)",
        min_value=bounds.min_years,
        max_value=bounds.max_years,
        value=DEFAULT_YEARS,
        step=1,
    )
with control_cols[1]:
    scenario_threshold = st.slider(
        "Probability threshold for this page (%)",
        min_value=bounds.min_probability_threshold,
        max_value=bounds.max_probability_threshold,
        value=clamp_probability_threshold(settings.probability_threshold),
        step=bounds.probability_threshold_step,
        help="Temporary override; the saved setting is unchanged.",
    )
    scenario_ratio = st.slider(
        "Investment ratio for this page (%)",
        min_value=bounds.min_investment_ratio,
        max_value=bounds.max_investment_ratio,
        value=float(settings.investment_ratio),
        step=1.0,
        help="Temporary override; the saved setting is unchanged.",
    )

scenario = settings.replace(
    probability_threshold=scenario_threshold,
    investment_ratio=scenario_ratio,
)

# =============================================================================
# VALIDATION
# =============================================================================

validation_result = validate_all(scenario, years, bounds, model)

if not validation_result.is_valid():
    st.error("Please fix the following input errors:")
    for error_msg in validation_result.error_messages():
        st.warning(error_msg)
    st.stop()

# =============================================================================
# CALCULATION
# =============================================================================

split = scenario.asset_split
investment_amount = split.investment_amount

stats = calculate_investment_distribution(scenario.distribution_params(years), model)
interval = confidence_interval(stats, bounds.confidence_level)
worst_case = calculate_worst_case(stats, investment_amount, scenario.probability_threshold)
total_worst_case = calculate_total_assets_worst_case(split, worst_case)
profit = stats.mean - investment_amount

# =============================================================================
# CHART
# =============================================================================

curve_frame: pd.DataFrame | None = None
figure: go.Figure | None = None

curve = try_generate_distribution_curve(
    stats,
    num_points=DEFAULT_CURVE_CONFIG.num_points,
    num_std_dev=DEFAULT_CURVE_CONFIG.num_std_dev,
)

if curve is None:
    if stats.is_degenerate:
        st.info("With zero risk the outcome is certain; there is no distribution to draw.")
    else:
        st.info(
            "The invested amount is too small to draw the distribution "
            "on this scale; see the statistics below."
        )
    st.metric(f"Expected assets after {years} years", format_currency(stats.mean))
else:
    curve_frame = curve.to_frame()
    curve_frame["probability_below"] = distribution_cdf(curve_frame["x"].to_numpy(), stats)
    curve_frame["change"] = curve_frame["x"] - investment_amount
    curve_frame["change_rate"] = curve_frame["change"] / investment_amount

    figure = go.Figure(
        data=[
            go.Scatter(
                x=curve_frame["x"],
                y=curve_frame["y"],
                mode="lines",
                fill="tozeroy",
                line=dict(color="rgb(75, 192, 192)", width=2),
                fillcolor="rgba(75, 192, 192, 0.2)",
                name="Probability density",
                customdata=curve_frame[["probability_below", "change", "change_rate"]].to_numpy(),
                hovertemplate=(
                    "Asset value: $%{x:,.0f}<br>"
                    "Probability of this value or below: %{customdata[0]:.1%}<br>"
                    "Change: %{customdata[1]:+,.0f}<br>"
                    "Change rate: %{customdata[2]:+.1%}"
                    "<extra></extra>"
                ),
            )
        ]
    )
    figure.add_vline(
        x=investment_amount,
        line_dash="dash",
        line_color="gray",
        annotation_text="Invested",
        annotation_position="top left",
    )
    figure.add_vline(
        x=worst_case.asset_value,
        line_dash="dot",
        line_color="#dc3545",
        annotation_text=f"Worst case ({scenario.probability_threshold:g}%)",
        annotation_position="top right",
    )
    figure.update_layout(
        title=f"Invested assets after {years} years ({MODEL_LABELS[model]})",
        xaxis_title="Asset value",
        yaxis_title="Probability density",
        yaxis=dict(exponentformat="e"),
        showlegend=False,
    )
    st.plotly_chart(figure, use_container_width=True)

# =============================================================================
# DISPLAY
# =============================================================================

st.subheader("Statistics")
stat_cols = st.columns(4)
stat_cols[0].metric(
    "Mean (expected value)",
    format_currency(stats.mean),
    delta=f"{format_signed_currency(profit)} / {format_signed_percent(profit / investment_amount)}",
)
stat_cols[1].metric("Standard deviation", format_currency(stats.std_dev))
stat_cols[2].metric(
    "Median",
    format_currency(stats.median),
    help="Half of the outcomes end below this value.",
)
stat_cols[3].metric(
    f"{interval.level:.0%} interval",
    f"{format_currency(interval.lower)} - {format_currency(interval.upper)}",
)
if model is DistributionModel.NORMAL:
    st.caption(
        "The normal approximation can put probability on negative values; "
        "those are cut off at zero."
    )

st.subheader("Worst case within the probability threshold")
st.write(
    f"Investing {scenario.investment_ratio:g}% ({format_currency(investment_amount)}), "
    f"the worst case within {scenario.probability_threshold:g}% of outcomes is:"
)
worst_case_table = pd.DataFrame(
    [
        {
            "Scope": "Invested part",
            "Amount": format_currency(worst_case.asset_value),
            "Change": format_signed_currency(worst_case.loss_or_gain),
            "Change rate": format_signed_percent(worst_case.change_rate),
        },
        {
            "Scope": "Total assets",
            "Amount": format_currency(total_worst_case.asset_value),
            "Change": format_signed_currency(total_worst_case.change),
            "Change rate": format_signed_percent(total_worst_case.change_rate),
        },
    ]
)
st.dataframe(worst_case_table, hide_index=True, use_container_width=True)
st.caption(
    f"Outcomes fall below this value with {worst_case.tail_probability:.1f}% probability. "
    f"Total assets = invested part ({format_currency(worst_case.asset_value)}) "
    f"+ non-invested part ({format_currency(split.non_investment_amount)})."
)

# =============================================================================
# EXPORT
# =============================================================================

summary = {
    "settings": scenario.to_dict(),
    "years": years,
    "model": model.value,
    "mean": stats.mean,
    "std_dev": stats.std_dev,
    "log_mean": stats.log_mean,
    "log_std_dev": stats.log_std_dev,
    "confidence_interval": {
        "level": interval.level,
        "lower": interval.lower,
        "upper": interval.upper,
    },
    "worst_case": {
        "probability_threshold": worst_case.probability_threshold,
        "asset_value": worst_case.asset_value,
        "loss_or_gain": worst_case.loss_or_gain,
        "total_assets_value": total_worst_case.asset_value,
        "total_assets_change": total_worst_case.change,
    },
}

st.subheader("Export")
export_cols = st.columns(3)
export_cols[0].download_button(
    "Summary (JSON)",
    data=json.dumps(summary, indent=2),
    file_name="asset_distribution_summary.json",
    mime="application/json",
)
if curve_frame is not None and figure is not None:
    export_cols[1].download_button(
        "Density curve (CSV)",
        data=curve_frame.to_csv(index=False),
        file_name="asset_distribution_curve.csv",
        mime="text/csv",
    )
    export_cols[2].download_button(
        "Chart (HTML)",
        data=figure.to_html(include_plotlyjs="cdn"),
        file_name="asset_distribution_chart.html",
        mime="text/html",
    )
