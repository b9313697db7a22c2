import logging

import uvicorn

from core.config import WEB_HOST, WEB_PORT
from web import app


def main():
    config = uvicorn.Config(app=app, host=WEB_HOST, port=WEB_PORT, log_level="info")
    server = uvicorn.Server(config)
    try:
        logging.info(f"Server running on http://localhost:{WEB_PORT}")
        server.run()
    except KeyboardInterrupt:
        logging.info("Server shutdown by keyboard interrupt")


if __name__ == "__main__":
    main()
