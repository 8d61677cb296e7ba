#!/usr/bin/env python
"""Development runner for SlothBoost. Run this instead of installing the package."""

import sys
from pathlib import Path

# Add src to Python path
project_root = Path(__file__).parent
src_path = project_root / "src"
sys.path.insert(0, str(src_path))

import uvicorn

from web_backend.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "web_backend.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        reload_dirs=[str(src_path)] if settings.DEBUG else None,
    )
