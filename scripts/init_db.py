from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.rollcall.rollcall.database.bootstrap import init_db
from src.rollcall.rollcall.main import create_app


def main() -> None:
    app = create_app(overrides={"AUTO_INIT_DB": False})
    tables = init_db(app)
    print(f"OK: schema ready -> {app.config['SQLALCHEMY_DATABASE_URI'].split('@')[-1]} (tables={len(tables)})")
    for name in tables:
        print(f"  - {name}")


if __name__ == "__main__":
    main()
