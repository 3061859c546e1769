"""HTTP entry point: `uvicorn main:app` or `python main.py`.

The stdio transport is the `onepassword-mcp` console script instead.
"""
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from onepassword_mcp.app import create_app  # noqa: E402
from onepassword_mcp.settings import settings  # noqa: E402

app = create_app(settings)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=os.environ.get("HOST", "127.0.0.1"),
        port=int(os.environ.get("PORT", "8089")),
        reload=os.environ.get("RELOAD", "false").lower() in ("1", "true", "yes"),
        # uvicorn's own access log stays off; requests are logged as JSON by the app
        access_log=False,
        log_level=settings.log_level.replace("warn", "warning"),
    )
