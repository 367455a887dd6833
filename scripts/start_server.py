#!/usr/bin/env python3
"""
Start the Talent Allocation matching API server
"""
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import uvicorn

from config import API_HOST, API_PORT, API_RELOAD, LOG_LEVEL


def main():
    """Start the uvicorn server"""
    print("🚀 Starting Talent Allocation Matching API...")
    print("=" * 60)
    print(f"📍 API will be available at: http://localhost:{API_PORT}")
    print(f"📚 API docs at: http://localhost:{API_PORT}/docs")
    print("=" * 60)
    print()

    uvicorn.run(
        "api.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_RELOAD,
        log_level=LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
