from flavorchart.utilities.config import DATA_DIR

# Centralized paths for data files (single source of truth)
MASTER_CSV = DATA_DIR / 'master.csv'
STATE_FILE = DATA_DIR / 'chart_state.json'

__all__ = ['DATA_DIR', 'MASTER_CSV', 'STATE_FILE']
