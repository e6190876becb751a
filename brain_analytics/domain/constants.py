"""
Domain Constants

This module contains constant definitions valid across the domain layer.
"""

# Fixed catalog order. Also the tie-break order for game recommendations.
GAME_CATALOG = (
    "memory_game",
    "reaction_game",
    "calculation_game",
    "pattern_memory",
    "puzzle_game",
)

GAME_NAMES = {
    "memory_game": "Memory Game",
    "reaction_game": "Reaction Speed Game",
    "calculation_game": "Calculation Game",
    "pattern_memory": "Pattern Memory Game",
    "puzzle_game": "Puzzle Game",
}

# Ordered from easiest to hardest
DIFFICULTY_LEVELS = {
    "easy": {"name": "Beginner", "multiplier": 1.0, "encoding": 1},
    "medium": {"name": "Intermediate", "multiplier": 1.5, "encoding": 2},
    "hard": {"name": "Advanced", "multiplier": 2.0, "encoding": 3},
    "expert": {"name": "Expert", "multiplier": 3.0, "encoding": 4},
}

# Time windows (days)
SCORE_WINDOW_DAYS = 30
ENGAGEMENT_WINDOW_DAYS = 7
CHURN_WINDOW_DAYS = 30
ACTIVITY_DECLINE_WINDOW_DAYS = 14

# Minimum qualifying records
MIN_SCORE_RECORDS = 5
MIN_DIFFICULTY_RECORDS = 5
MIN_IMPROVEMENT_RECORDS = 10

SESSION_GAP_MINUTES = 30
DIFFICULTY_HISTORY_SIZE = 10
NO_ACTIVITY_DAYS = 999

GAME_SETTINGS = {
    "memory_game": {
        "easy": {"card_count": 6, "show_time": 3000, "max_mistakes": 5},
        "medium": {"card_count": 8, "show_time": 2500, "max_mistakes": 3},
        "hard": {"card_count": 12, "show_time": 2000, "max_mistakes": 2},
        "expert": {"card_count": 16, "show_time": 1500, "max_mistakes": 1},
    },
    "reaction_game": {
        "easy": {"target_count": 10, "time_limit": 30, "min_interval": 1000},
        "medium": {"target_count": 15, "time_limit": 25, "min_interval": 800},
        "hard": {"target_count": 20, "time_limit": 20, "min_interval": 600},
        "expert": {"target_count": 25, "time_limit": 15, "min_interval": 400},
    },
    "calculation_game": {
        "easy": {"max_number": 20, "operation_count": 3, "time_limit": 60},
        "medium": {"max_number": 50, "operation_count": 4, "time_limit": 45},
        "hard": {"max_number": 100, "operation_count": 5, "time_limit": 30},
        "expert": {"max_number": 200, "operation_count": 6, "time_limit": 20},
    },
    "pattern_memory": {
        "easy": {"sequence_length": 3, "show_time": 2000, "grid_size": 3},
        "medium": {"sequence_length": 4, "show_time": 1500, "grid_size": 4},
        "hard": {"sequence_length": 5, "show_time": 1000, "grid_size": 4},
        "expert": {"sequence_length": 6, "show_time": 800, "grid_size": 5},
    },
    "puzzle_game": {
        "easy": {"piece_count": 9, "time_limit": 300, "hints": 3},
        "medium": {"piece_count": 16, "time_limit": 240, "hints": 2},
        "hard": {"piece_count": 25, "time_limit": 180, "hints": 1},
        "expert": {"piece_count": 36, "time_limit": 120, "hints": 0},
    },
}

DEFAULT_DIFFICULTY_GOAL = {"target_score": 100, "target_time": 60, "target_accuracy": 0.8}

DIFFICULTY_GOALS = {
    "memory_game": {
        "easy": {"target_score": 100, "target_time": 60, "target_accuracy": 0.8},
        "medium": {"target_score": 150, "target_time": 45, "target_accuracy": 0.85},
        "hard": {"target_score": 200, "target_time": 30, "target_accuracy": 0.9},
        "expert": {"target_score": 250, "target_time": 20, "target_accuracy": 0.95},
    },
    "reaction_game": {
        "easy": {"target_score": 80, "target_time": 30, "target_accuracy": 0.7},
        "medium": {"target_score": 120, "target_time": 25, "target_accuracy": 0.8},
        "hard": {"target_score": 160, "target_time": 20, "target_accuracy": 0.85},
        "expert": {"target_score": 200, "target_time": 15, "target_accuracy": 0.9},
    },
    "calculation_game": {
        "easy": {"target_score": 90, "target_time": 60, "target_accuracy": 0.75},
        "medium": {"target_score": 135, "target_time": 45, "target_accuracy": 0.8},
        "hard": {"target_score": 180, "target_time": 30, "target_accuracy": 0.85},
        "expert": {"target_score": 225, "target_time": 20, "target_accuracy": 0.9},
    },
}

HINT_SETTINGS = {
    "memory_game": {
        "easy": {"show_timer": True, "highlight_matches": True, "show_progress": True},
        "medium": {"show_timer": True, "highlight_matches": False, "show_progress": True},
        "hard": {"show_timer": False, "highlight_matches": False, "show_progress": False},
        "expert": {"show_timer": False, "highlight_matches": False, "show_progress": False},
    },
    "calculation_game": {
        "easy": {"show_timer": True, "show_hints": True, "allow_calculator": True},
        "medium": {"show_timer": True, "show_hints": False, "allow_calculator": False},
        "hard": {"show_timer": False, "show_hints": False, "allow_calculator": False},
        "expert": {"show_timer": False, "show_hints": False, "allow_calculator": False},
    },
}
