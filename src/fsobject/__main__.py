from __future__ import annotations

from fsobject.main import main

main()
