from __future__ import annotations

import sys
import time
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.timeclock.timeclock.terminal import run_terminal


def main() -> None:
    terminal_code = sys.argv[1] if len(sys.argv) > 1 else None
    agent = run_terminal(terminal_code)
    print(f"OK: Terminal running against {agent.api.base_url} (pending={agent.coordinator.pending_count()})")
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        agent.stop()


if __name__ == "__main__":
    main()
