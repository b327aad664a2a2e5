from __future__ import annotations

import sys
from pathlib import Path

SRC = Path(__file__).resolve().parent / "src" / "expense_system"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from expense_system.main import create_app

app = create_app()


if __name__ == "__main__":
    app.run(debug=bool(app.config.get("DEBUG", False)))
