#!/usr/bin/env python3
"""
Entry point that starts the FastAPI server
"""
import os
import sys
from pathlib import Path

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "api.main:app",
        host=os.environ.get("SMARTQA_API_HOST", "0.0.0.0"),
        port=int(os.environ.get("SMARTQA_API_PORT", "8000")),
        reload=os.environ.get("SMARTQA_API_RELOAD", "").lower() in ("1", "true", "yes"),
    )
