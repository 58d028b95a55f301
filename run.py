"""Run the app on local dev system."""
from __future__ import annotations

import faulthandler

import uvicorn

if __name__ == "__main__":
    faulthandler.enable()

    uvicorn.run(
        "botanical_friend.main:app",
        host="localhost",
        port=5000,
        # reload=True
    )
