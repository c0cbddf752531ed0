from __future__ import annotations

import os

from voicerouter.api.app import app  # noqa: F401


def run() -> None:
    """
    Programmatic runner:
    python -m voicerouter.api.main
    """
    import uvicorn  # local import to keep import graph light

    host = os.getenv("VOICEROUTER_API_HOST", "0.0.0.0")
    port = int(os.getenv("VOICEROUTER_API_PORT", "8000"))

    uvicorn.run("voicerouter.api.main:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    run()
