"""Box-score statistics engine: filtering, aggregation, trends, rankings and game outcomes."""

from .aggregation import aggregate_batting, aggregate_pitching, list_categories, list_players, team_totals
from .config import ScorebookConfig, load_config
from .errors import ConfigError, ScorebookError
from .filters import FilterCriteria, filter_rows, parse_date
from .games import derive_games
from .ranking import correlate, leaderboard, pearson, rank
from .records import as_frame, detect_kind, load_csv, read_csv_text
from .trends import bucket, player_trend, team_trend

__version__ = "0.1.0"
