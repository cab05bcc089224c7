"""Entry point: python -m apigen

Reads api-gen.json, loads the Swagger document and writes the TypeScript client.
"""

from __future__ import annotations

from .cli import main

if __name__ == "__main__":
    main()
