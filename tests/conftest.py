from __future__ import annotations

import sys
from pathlib import Path

# Make the repository checkout importable without installation.
_repo_root = Path(__file__).resolve().parent.parent
if str(_repo_root) not in sys.path:
    sys.path.insert(0, str(_repo_root))
