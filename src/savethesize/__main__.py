from __future__ import annotations

from savethesize.cli import main

raise SystemExit(main())
