"""
Serverless entry point: exposes the StayNest ASGI app as ``app``.
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from staynest.api.app import create_app  # noqa: E402

app = create_app()
