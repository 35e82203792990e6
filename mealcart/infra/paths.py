from mealcart.utilities.config import DATA_DIR

# Centralized paths for data files (single source of truth)
STATE_FILE = DATA_DIR / 'planner_state.json'

__all__ = ['DATA_DIR', 'STATE_FILE']
