from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.rfid_attendance.rfid_attendance.main import create_app


def main() -> None:
    app = create_app()
    app.run(host="0.0.0.0", port=5000, debug=bool(app.config.get("DEBUG")))


if __name__ == "__main__":
    main()
