"""Entry point: python -m routegen --spec openapi.json

Reads the OpenAPI document, generates models.py and handlers.py.
"""

from __future__ import annotations

from .cli import main

if __name__ == "__main__":
    main()
