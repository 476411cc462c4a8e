import sys
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

# Allow importing histomorph from repository root
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
