import logging
import os

import uvicorn
from dotenv import load_dotenv

from sbizproxy.shared.config import settings

load_dotenv()


def run():
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    port = int(os.environ.get("PORT", 8000))
    logging.getLogger("sbizproxy").info(f"Starting sbiz-proxy on port {port}...")
    uvicorn.run("sbizproxy.api.server:app", host="0.0.0.0", port=port)


if __name__ == "__main__":
    run()
