import argparse
import logging
from pathlib import Path

from .app import create_app
from .deadline import make_request_handler
from .netinfo import startup_urls

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Share files with anyone on the local network.")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to (e.g. 127.0.0.1 or 0.0.0.0)")
    parser.add_argument("--port", type=int, default=3000, help="Port to run the server on")
    parser.add_argument("--upload-dir", default="uploads", help="Directory holding the shared files")
    parser.add_argument("--public-dir", default="public", help="Directory of static assets served at /")
    parser.add_argument("--max-size-mb", type=int, default=100, help="Largest accepted upload, in MiB")
    parser.add_argument("--timeout", type=float, default=30.0, help="Seconds allowed to receive an upload")
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING, ...)")
    return parser

def print_banner(host: str, port: int) -> None:
    urls = startup_urls(host, port)
    base = urls[-1][1]

    print("\n=== Server started ===")
    for label, url in urls:
        print(f"- {label + ':':7}{url}")

    print("\ncurl examples:")
    print(f'  curl -F "file=@./path/to/file.zip" "{base}/upload?json=1"')
    print(f'  curl -L -o "./file.zip" "{base}/download/file.zip"')
    print()

def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    app = create_app(
        Path(args.upload_dir),
        public_dir=Path(args.public_dir),
        max_upload_bytes=args.max_size_mb * 1024 * 1024,
        upload_timeout=args.timeout,
    )

    print_banner(args.host, args.port)
    app.run(
        debug=False,
        host=args.host,
        port=args.port,
        threaded=True,
        request_handler=make_request_handler(args.timeout),
    )

if __name__ == "__main__":
    main()
