from __future__ import annotations

from flowzonify.main import main

if __name__ == "__main__":
    raise SystemExit(main())
