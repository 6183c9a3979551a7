# Team Scorebook - Streamlit Web App
# Run with: streamlit run streamlit_app.py

import glob
import logging
import os
from dataclasses import asdict

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st
from plotly.subplots import make_subplots

from scorebook import (
    FilterCriteria,
    aggregate_batting,
    aggregate_pitching,
    correlate,
    derive_games,
    filter_rows,
    leaderboard,
    list_categories,
    list_players,
    load_config,
    load_csv,
    pearson,
    player_trend,
    rank,
    read_csv_text,
    team_totals,
    team_trend,
)
from scorebook.config import ScorebookConfig
from scorebook.records import as_frame, detect_kind
from scorebook.schema import BATTING, PITCHING
from scorebook.stats import format_rate

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("scorebook.app")

# Page configuration
st.set_page_config(
    page_title="Team Scorebook - Stats Dashboard",
    page_icon="⚾",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS for styling
st.markdown("""
<style>
    .main-header {
        font-size: 2.6rem;
        font-weight: bold;
        text-align: center;
        color: #1f4e79;
        margin-bottom: 1.5rem;
    }
</style>
""", unsafe_allow_html=True)

BATTING_METRICS = {
    'avg': 'AVG', 'ops': 'OPS', 'hr': 'HR', 'rbi': 'RBI', 'sb': 'SB',
    'obp': 'OBP', 'slg': 'SLG', 'bb': 'BB', 'so': 'SO'
}
PITCHING_METRICS = {
    'era': 'ERA', 'whip': 'WHIP', 'kbb': 'K/BB', 'so': 'SO', 'win': 'W', 'display_innings': 'IP'
}


class ScorebookAnalyzer:
    def __init__(self, config=None):
        self.config = config or ScorebookConfig()
        self.batting = as_frame(None, BATTING)
        self.pitching = as_frame(None, PITCHING)

    def load_data_from_folder(self, data_folder="data"):
        """Load scorer exports (*_b.csv batting, *_p.csv pitching) from a local folder"""
        if not os.path.exists(data_folder):
            st.error(f"❌ Data folder '{data_folder}' not found!")
            st.info(f"Please create a '{data_folder}' folder and add your exported CSV files there.")
            return False

        csv_files = sorted(glob.glob(os.path.join(data_folder, "*.csv")))
        if not csv_files:
            st.error(f"❌ No CSV files found in '{data_folder}' folder!")
            return False

        loaded = {BATTING: [], PITCHING: []}
        progress_bar = st.progress(0)
        status_text = st.empty()

        for i, csv_file in enumerate(csv_files):
            progress_bar.progress((i + 1) / len(csv_files))
            status_text.text(f"Processing {os.path.basename(csv_file)}...")
            try:
                kind, frame = load_csv(csv_file)
            except (OSError, UnicodeDecodeError) as e:
                st.warning(f"⚠️ Error reading {os.path.basename(csv_file)}: {e}")
                continue
            if kind is None:
                st.warning(f"⚠️ {os.path.basename(csv_file)} is neither a batting nor a pitching export, skipped")
                continue
            loaded[kind].append(frame)

        progress_bar.empty()
        status_text.empty()
        return self._replace(loaded, len(csv_files))

    def load_uploaded_files(self, uploaded_files):
        """Replace the current rows with uploaded exports"""
        loaded = {BATTING: [], PITCHING: []}
        for uploaded in uploaded_files:
            try:
                text = uploaded.getvalue().decode("utf-8")
            except UnicodeDecodeError as e:
                st.warning(f"⚠️ Error reading {uploaded.name}: {e}")
                continue
            raw = read_csv_text(text)
            kind = detect_kind(uploaded.name, raw)
            if kind is None:
                st.warning(f"⚠️ {uploaded.name} is neither a batting nor a pitching export, skipped")
                continue
            loaded[kind].append(as_frame(raw, kind))
        return self._replace(loaded, len(uploaded_files))

    def _replace(self, loaded, file_count):
        if not loaded[BATTING] and not loaded[PITCHING]:
            st.error("❌ No valid data could be loaded from CSV files.")
            return False
        # A kind that was not part of this load keeps its current rows
        if loaded[BATTING]:
            self.batting = pd.concat(loaded[BATTING], ignore_index=True)
        if loaded[PITCHING]:
            self.pitching = pd.concat(loaded[PITCHING], ignore_index=True)
        logger.info("Loaded %d file(s): %d batting, %d pitching rows",
                    file_count, len(self.batting), len(self.pitching))
        st.success(f"✅ Loaded {file_count} file(s): {len(self.batting)} batting rows, "
                   f"{len(self.pitching)} pitching rows")
        return True


# Derived data is recomputed from raw rows + view parameters and memoized on them
@st.cache_data(show_spinner=False)
def cached_filter(rows, criteria, kind):
    return filter_rows(rows, criteria, kind)


@st.cache_data(show_spinner=False)
def cached_summaries(batting, pitching):
    return aggregate_batting(batting), aggregate_pitching(pitching)


@st.cache_data(show_spinner=False)
def cached_games(batting, pitching, aliases, unknown):
    return derive_games(batting, pitching, aliases, unknown)


def main():
    st.markdown('<h1 class="main-header">⚾ Team Scorebook Dashboard</h1>', unsafe_allow_html=True)

    if 'analyzer' not in st.session_state:
        config = load_config(os.environ.get("SCOREBOOK_CONFIG", "scorebook.yaml"))
        st.session_state.analyzer = ScorebookAnalyzer(config)
        st.session_state.analyzer.load_data_from_folder(config.data_folder)

    analyzer = st.session_state.analyzer
    config = analyzer.config

    # Sidebar for data management and filters
    with st.sidebar:
        st.header("📁 Data Management")
        data_folder = st.text_input("Data Folder Path", value=config.data_folder,
                                    help="Folder containing *_b.csv / *_p.csv exports")
        if st.button("🔄 Load/Reload Data"):
            with st.spinner("Loading data from folder..."):
                if analyzer.load_data_from_folder(data_folder):
                    st.rerun()

        uploaded_files = st.file_uploader("Upload exports", type="csv", accept_multiple_files=True)
        if uploaded_files and st.button("📥 Import Uploaded Files"):
            if analyzer.load_uploaded_files(uploaded_files):
                st.rerun()

        st.header("⚙️ Home Team")
        aliases_text = st.text_input("Home team names (comma separated)",
                                     value=", ".join(config.home_team_aliases))
        aliases = tuple(a.strip() for a in aliases_text.split(",") if a.strip())

        st.header("🔍 Filters")
        start_date = st.text_input("Start date (YYYY-MM-DD)", value=config.default_start_date)
        end_date = st.text_input("End date (YYYY-MM-DD)", value=config.default_end_date)
        team_keyword = st.text_input("Team keyword (regex)", value="")
        category = st.selectbox("Category", options=['all'] + list_categories(analyzer.batting))

    criteria = FilterCriteria(start_date=start_date, end_date=end_date,
                              team_keyword=team_keyword, category=category)
    batting = cached_filter(analyzer.batting, asdict(criteria), BATTING)
    pitching = cached_filter(analyzer.pitching, asdict(criteria), PITCHING)

    if batting.empty and pitching.empty:
        st.info("👆 No rows match the current data and filters.")
        return

    batting_summary, pitching_summary = cached_summaries(batting, pitching)

    tab1, tab2, tab3, tab4, tab5 = st.tabs(["📈 Dashboard", "🏏 Batting", "🎯 Pitching", "📊 Trends", "🏆 Comparison"])

    with tab1:
        create_dashboard_tab(batting, pitching, aliases, config.unknown_opponent)
    with tab2:
        create_summary_tab(batting_summary, "batting_summary.csv")
    with tab3:
        create_summary_tab(pitching_summary, "pitching_summary.csv")
    with tab4:
        create_trends_tab(batting, pitching, aliases, config.unknown_opponent)
    with tab5:
        create_comparison_tab(batting_summary, pitching_summary, config)


def create_dashboard_tab(batting, pitching, aliases, unknown):
    """Team totals and the game-by-game record"""
    st.header("Team Overview")

    totals = team_totals(batting, pitching)
    if totals is None:
        st.info("No batting rows in the selected range.")
        return

    col1, col2, col3, col4, col5 = st.columns(5)
    with col1:
        st.metric("Games", totals.games)
    with col2:
        st.metric("Team AVG", format_rate(totals.avg))
    with col3:
        st.metric("Runs", totals.runs)
    with col4:
        st.metric("HR", totals.hr)
    with col5:
        st.metric("Team ERA", f"{totals.era:.2f}")

    games = cached_games(batting, pitching, aliases, unknown)
    if games.empty:
        return

    st.subheader("Game by Game")
    fig = make_subplots(specs=[[{"secondary_y": True}]])
    fig.add_trace(go.Bar(x=games['label'], y=games['runs_scored'], name='Runs scored',
                         marker_color='#1f77b4'), secondary_y=False)
    fig.add_trace(go.Bar(x=games['label'], y=games['runs_allowed'], name='Runs allowed',
                         marker_color='#d62728'), secondary_y=False)
    fig.add_trace(go.Scatter(x=games['label'], y=games['win_pct'], name='Win %',
                             mode='lines+markers', line=dict(color='#2ca02c')), secondary_y=True)
    fig.update_yaxes(title_text="Runs", secondary_y=False)
    fig.update_yaxes(title_text="Win %", range=[0, 1], secondary_y=True)
    st.plotly_chart(fig, use_container_width=True)

    st.dataframe(games[['date', 'opponent', 'score', 'runs_scored', 'runs_allowed', 'result', 'win_pct']],
                 use_container_width=True)


def create_summary_tab(summary, file_name):
    """Player table with download"""
    if summary.empty:
        st.info("No rows in the selected range.")
        return
    st.dataframe(summary.drop(columns=['player_key']), use_container_width=True)
    st.download_button(
        label="📥 Download CSV",
        data=summary.to_csv(index=False),
        file_name=file_name,
        mime="text/csv",
        key=f"download_{file_name}"
    )


def create_trends_tab(batting, pitching, aliases, unknown):
    """Team snapshot trends and player cumulative trends"""
    st.header("📊 Trends")

    col1, col2, col3 = st.columns(3)
    with col1:
        target = st.radio("Target", options=['team', 'player'], horizontal=True)
    with col2:
        kind = st.radio("Type", options=[BATTING, PITCHING], horizontal=True)
    with col3:
        period = st.selectbox("Period", options=['monthly', 'quarterly', 'game'])

    rows = batting if kind == BATTING else pitching
    if target == 'team':
        trend = team_trend(rows, period, kind, aliases, unknown)
    else:
        players = list_players(batting, pitching)
        if players.empty:
            st.info("No players in the selected range.")
            return
        labels = {row.player_key: f"#{row.number} {row.name}" for row in players.itertuples()}
        player_key = st.selectbox("Player", options=list(labels), format_func=labels.get)
        trend = player_trend(rows, player_key, period, kind, aliases, unknown)

    if trend.empty:
        st.info("No dated rows for this selection.")
        return

    if kind == BATTING:
        rate_cols, pct_cols = ['avg', 'obp', 'slg', 'ops'], ['bb_rate', 'so_rate']
    else:
        rate_cols, pct_cols = ['era', 'whip', 'k_per7', 'bb_per7'], ['strike_rate']

    title = "Cumulative" if target == 'player' else "Per period"
    fig = px.line(trend, x='period_key', y=rate_cols, markers=True, title=f"{title} rates")
    st.plotly_chart(fig, use_container_width=True)
    fig = px.bar(trend, x='period_key', y=pct_cols, barmode='group', title=f"{title} percentages")
    st.plotly_chart(fig, use_container_width=True)
    st.dataframe(trend, use_container_width=True)


def create_comparison_tab(batting_summary, pitching_summary, config):
    """Rankings, leader lists and correlation scatter"""
    st.header("🏆 Comparison")

    col1, col2, col3 = st.columns(3)
    with col1:
        kind = st.radio("Data", options=[BATTING, PITCHING], horizontal=True, key="comparison_kind")
    with col2:
        view = st.radio("View", options=['ranking', 'scatter', 'leaders'], horizontal=True)
    with col3:
        if kind == BATTING:
            minimum = st.number_input("Minimum PA", value=float(config.min_plate_appearances), step=1.0)
        else:
            minimum = st.number_input("Minimum innings", value=float(config.min_innings), step=1.0)

    summary = batting_summary if kind == BATTING else pitching_summary
    metrics = BATTING_METRICS if kind == BATTING else PITCHING_METRICS
    if summary.empty:
        st.info("No players in the selected range.")
        return

    if view == 'ranking':
        metric = st.selectbox("Metric", options=list(metrics), format_func=metrics.get)
        ranking = rank(summary, metric, minimum, kind)
        fig = px.bar(ranking, x='value', y='name', orientation='h', text='display_value',
                     title=f"{metrics[metric]} ranking")
        fig.update_layout(yaxis={'categoryorder': 'array', 'categoryarray': list(ranking['name'])[::-1]},
                          height=max(400, 28 * len(ranking)))
        st.plotly_chart(fig, use_container_width=True)

    elif view == 'scatter':
        defaults = ('obp', 'slg') if kind == BATTING else ('era', 'whip')
        options = [m for m in metrics if m != 'display_innings']
        col1, col2 = st.columns(2)
        with col1:
            x_metric = st.selectbox("X axis", options=options, index=options.index(defaults[0]))
        with col2:
            y_metric = st.selectbox("Y axis", options=options, index=options.index(defaults[1]))
        points = correlate(summary, x_metric, y_metric, minimum=minimum, kind=kind)
        fig = px.scatter(points, x='x', y='y', size='z', hover_name='name',
                         labels={'x': metrics[x_metric], 'y': metrics[y_metric]})
        st.plotly_chart(fig, use_container_width=True)
        st.metric("Pearson r", f"{pearson(points):.3f}")

    else:
        board = leaderboard(batting_summary, pitching_summary,
                            min_pa=minimum if kind == BATTING else config.min_plate_appearances,
                            min_innings=minimum if kind == PITCHING else config.min_innings)
        keys = [k for k in board if k.startswith(f"{kind}:")]
        columns = st.columns(3)
        for i, key in enumerate(keys):
            with columns[i % 3]:
                st.markdown(f"**{key.split(':', 1)[1].upper()}**")
                st.table(board[key][['name', 'display_value']])


if __name__ == "__main__":
    main()
