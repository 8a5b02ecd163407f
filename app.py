"""
LogFitFitter - Interactive Well-Log Distribution Fitting
A Streamlit application for fitting and ranking probability distributions on well-log curves.
"""

import streamlit as st
import numpy as np
import seaborn as sns
from datetime import datetime

from logfit.cleaning import select_sample
from logfit.config import AnalysisConfig
from logfit.descriptive import describe_sample, interpret_p_value, shape_recommendation
from logfit.exceptions import LogFitError
from logfit.families import DEFAULT_FAMILIES
from logfit.interactive import plot_ranked_fits_plotly
from logfit.loader import SUPPORTED_FORMATS, list_curves, load_well_log, synthetic_porosity_log
from logfit.pipeline import analyze_sample
from logfit.plotting import plot_cdf_difference, plot_histogram_with_fits, plot_kde, plot_qq_pp
from logfit.report import export_excel, failures_to_frame, format_params, ranking_to_frame

# Set seaborn color palette
sns.set_palette("husl")

# Page configuration
st.set_page_config(
    page_title="LogFitFitter - Well-Log Distribution Fitting",
    layout="wide"
)

st.title("LogFitFitter")
st.markdown("**Distribution fitting and goodness-of-fit ranking for well-log curves**")

with st.expander("Quick Start Guide", expanded=False):
    st.markdown("""
    ### Getting Started

    1. **Load a well log** in the sidebar: a LAS 2.0 file, or a CSV/Excel export with a depth column.
       Or use the synthetic porosity log to explore the tool.
    2. **Pick a curve** (e.g. `NEUT` or `DPHI`). Missing values and negative readings are dropped.
    3. **Fit Distributions**: eleven families are fitted to the standardized curve
       (zero mean, unit variance) and ranked by a chi-square statistic on 50 equal-probability bins.
       A Kolmogorov-Smirnov p-value is shown alongside.
    4. **Inspect the top fits** with histogram/PDF overlays, Q-Q and P-P plots.

    ### Interpreting Results

    - **Chi-square** (ranking): lower = better. The default *cumulative* variant compares cumulative
      expected and observed bin counts; switch to *pearson* for the conventional per-bin statistic.
    - **K-S p-value**: higher values suggest the data could come from the fitted distribution.
    - **Q-Q plot**: points on the diagonal = quantiles match. **P-P plot**: cumulative probabilities match.
    """)

# Initialize session state
if 'well_log' not in st.session_state:
    st.session_state.well_log = None
if 'analysis' not in st.session_state:
    st.session_state.analysis = None

# Sidebar for data input
with st.sidebar:
    st.header("Data Input")

    input_method = st.radio(
        "Choose input method:",
        ["Upload Well Log", "Use Test Data"]
    )

    if input_method == "Upload Well Log":
        uploaded_file = st.file_uploader(
            "Upload well log",
            type=list(SUPPORTED_FORMATS),
            help="LAS 2.0, CSV/TXT or Excel (.xlsx, .xls)"
        )
        if uploaded_file is not None:
            try:
                st.session_state.well_log = load_well_log(uploaded_file, name=uploaded_file.name)
            except LogFitError as e:
                st.error(f"Error: {e}")
                st.session_state.well_log = None
    else:
        if st.button("Load Test Dataset"):
            st.session_state.well_log = synthetic_porosity_log()
            st.session_state.analysis = None

    well_log = st.session_state.well_log
    sample = None

    if well_log is not None:
        st.subheader("Curves")
        if well_log.well_name:
            st.caption(f"Well: {well_log.well_name}")
        st.dataframe(list_curves(well_log), use_container_width=True, hide_index=True)

        selected_col = st.selectbox(
            "Select curve to analyze:",
            well_log.curve_names,
            index=well_log.curve_names.index('NEUT') if 'NEUT' in well_log.curve_names else 0,
            key="selected_curve",
        )

        with st.expander("Cleaning Options", expanded=False):
            drop_negative = st.checkbox("Drop negative readings", value=True, key="drop_negative")
            remove_zeros = st.checkbox(
                "Remove zero values",
                value=False,
                key="remove_zeros",
                help="Useful for porosity curves where 0 may be invalid"
            )
            clip_outliers = st.checkbox("Clip outliers above P99", value=False, key="clip_outliers")

        with st.expander("Fitting Options", expanded=False):
            n_bins = st.number_input("Chi-square bins", min_value=2, value=50, step=1)
            chi_square_method = st.selectbox("Chi-square method", ["cumulative", "pearson"])
            ks_method = st.selectbox("K-S test", ["one-sample", "two-sample"])
            seed = st.number_input("Random seed", min_value=0, value=42, step=1)
            families = st.multiselect(
                "Distribution families",
                [f.value for f in DEFAULT_FAMILIES],
                default=[f.value for f in DEFAULT_FAMILIES],
            )

        try:
            sample = select_sample(
                well_log,
                selected_col,
                drop_negative=drop_negative,
                remove_zeros=remove_zeros,
                clip_outliers=clip_outliers,
            )
            st.info(
                f"{len(sample)} valid readings "
                f"({sample.n_missing} missing, {sample.n_negative} negative, {sample.n_zero} zero removed)"
            )
        except LogFitError as e:
            st.error(f"Error: {e}")
            sample = None

# Main content
if sample is not None:
    data = sample.values

    st.header(f"Descriptive Statistics: {sample.name}")
    config = AnalysisConfig(
        column=sample.name,
        n_bins=int(n_bins),
        seed=int(seed),
        chi_square_method=chi_square_method,
        ks_method=ks_method,
        families=families or DEFAULT_FAMILIES,
        drop_negative=drop_negative,
        remove_zeros=remove_zeros,
        clip_outliers=clip_outliers,
    )

    stats_dict = describe_sample(sample)
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Count", f"{stats_dict['Count']:,}")
    col1.metric("Mean", f"{stats_dict['Mean']:.4f}")
    col2.metric("Minimum", f"{stats_dict['Minimum']:.4f}")
    col2.metric("Maximum", f"{stats_dict['Maximum']:.4f}")
    col3.metric("P10", f"{stats_dict['P10']:.4f}")
    col3.metric("P50 (Median)", f"{stats_dict['P50 (Median)']:.4f}")
    col3.metric("P90", f"{stats_dict['P90']:.4f}")
    col4.metric("Std Dev", f"{stats_dict['Std Dev']:.4f}")
    col4.metric("Skewness", f"{stats_dict['Skewness']:.2f}")
    col4.metric("Kurtosis", f"{stats_dict['Kurtosis']:.2f}")
    st.info(f"💡 **Recommendation:** {shape_recommendation(stats_dict['Skewness'])}")

    st.pyplot(plot_kde(data, bins=config.n_bins, title=f"{sample.name}: kernel density estimate"))

    st.header("Automatic Distribution Fitting")

    if st.button("Fit Distributions", type="primary"):
        with st.spinner("Fitting distributions..."):
            try:
                st.session_state.analysis = analyze_sample(sample, config)
                st.session_state.analysis.well_log = well_log
                st.success(f"Ranked {len(st.session_state.analysis.ranking)} distributions")
            except LogFitError as e:
                st.session_state.analysis = None
                st.error(f"Error: {e}")

    result = st.session_state.analysis
    if result is not None and result.sample.name == sample.name:
        ranking = result.ranking

        num_distributions = st.number_input(
            "Number of distributions to show",
            min_value=1,
            max_value=len(ranking),
            value=min(result.config.top_k, len(ranking)),
            step=1,
        )

        st.subheader(f"Top {num_distributions} Fitted Distributions")
        st.plotly_chart(
            plot_ranked_fits_plotly(result.normalized.values, ranking, num_distributions=num_distributions,
                                    n_bins=result.config.n_bins),
            use_container_width=True,
        )
        st.pyplot(plot_histogram_with_fits(data, result.overlay_candidates, bins=result.config.n_bins,
                                           title=f"{sample.name}: histogram + fitted PDFs (raw readings)"))

        st.subheader("Ranking (by chi-square, ascending)")
        st.dataframe(ranking_to_frame(ranking), use_container_width=True, hide_index=True)
        if ranking.failures:
            with st.expander(f"{len(ranking.failures)} families could not be fitted"):
                st.dataframe(failures_to_frame(ranking), use_container_width=True, hide_index=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        st.download_button(
            label="Download Excel Report",
            data=export_excel(result),
            file_name=f"LogFitFitter_{sample.name}_{timestamp}.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )

        for i, fit in enumerate(ranking.top(num_distributions)):
            p_label, p_desc = interpret_p_value(fit.p_value)
            with st.expander(f"#{i+1}: {fit.label} (χ² = {fit.chi_square:.4f}) - {p_label}", expanded=(i == 0)):
                col1, col2 = st.columns(2)
                with col1:
                    st.write(f"**Chi-square:** {fit.chi_square:.6f}")
                    st.write(f"**K-S p-value:** {fit.p_value:.6f}")
                    st.caption(f"**{p_label}**: {p_desc}")
                with col2:
                    aic = fit.aic
                    st.write(f"**AIC:** {aic:.2f}" if np.isfinite(aic) else "**AIC:** N/A")
                    st.write(f"**Parameters (standardized):** {format_params(fit)}")

                diag_col1, diag_col2 = st.columns(2)
                with diag_col1:
                    st.pyplot(plot_qq_pp(result.normalized.values, fit, seed=result.config.seed))
                with diag_col2:
                    st.pyplot(plot_cdf_difference(result.normalized.values, fit))
else:
    st.info("Load a well log or the test dataset from the sidebar to begin.")
