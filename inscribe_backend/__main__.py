"""
Run the Inscribe backend: `python -m inscribe_backend`.
"""
import argparse

from aiohttp import web

from .config import SERVER_HOST, SERVER_PORT
from .routes import create_app
from .shared import get_logger

logger = get_logger(__name__)


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Serve the image comment editor backend.")
    parser.add_argument("--host", default=SERVER_HOST, help="Bind address (default: %(default)s)")
    parser.add_argument("--port", type=int, default=SERVER_PORT, help="Port (default: %(default)s)")
    parser.add_argument("--exiftool", default=None, help="ExifTool executable (overrides the bundled copy)")
    args = parser.parse_args(argv)

    from .deps import build_services

    app = create_app(build_services(args.exiftool))
    logger.info("Listening on http://%s:%s", args.host, args.port)
    web.run_app(app, host=args.host, port=args.port, print=None)


if __name__ == "__main__":
    main()
