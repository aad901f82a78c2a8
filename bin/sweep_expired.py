# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""
Maintenance script – deletes every expired text.

The API already refuses and removes expired texts on read and sweeps in the
background; this script is for deployments that disable the background task
(SWEEP_INTERVAL_SECONDS=0) and prefer cron:
    */15 * * * *  python bin/sweep_expired.py
"""

import sys
import os

# ---------------------------------------------------------------------------
# Path setup so backend modules are importable
# ---------------------------------------------------------------------------
# bin/sweep_expired.py  →  ../  →  project root
_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
_BACKEND_DIR  = os.path.join(_PROJECT_ROOT, "backend")
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)

from core.logger import logger            # noqa: E402
from main import sweep_expired            # noqa: E402


def main():
    removed = sweep_expired()
    logger.info("sweep_expired: removed %d expired text(s)", removed)
    print(f"[sweep_expired] Removed {removed} expired text(s).")


if __name__ == "__main__":
    main()
