from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.rollcall.rollcall.database.bootstrap import clear_attendance_data
from src.rollcall.rollcall.main import create_app


def main() -> None:
    app = create_app(overrides={"AUTO_INIT_DB": False})
    attendance_deleted, people_deleted = clear_attendance_data(app)
    print(f"OK: deleted {attendance_deleted} attendance records")
    print(f"OK: deleted {people_deleted} people")


if __name__ == "__main__":
    main()
