from .models import DayEntry, MonthlyAnalysis, MalformedEntryError, RATING_LEVELS, BUCKETS, format_date, parse_date_key, count_words, rating_label, rating_color
from .window import select_window
from .trend import classify_trend
from .themes import extract_themes, THEME_KEYWORDS
from .insights import generate_insights, generate_recommendations
from .monthly import MonthlyAnalyzer, build_monthly_analysis, DEFAULT_WINDOW_DAYS
from .prompt import build_ai_prompt, build_simple_ai_prompt
