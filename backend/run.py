#!/usr/bin/env python3
"""
Entry point for running the Subkeep API server.

Usage:
    python run.py [--port PORT] [--host HOST]
"""

import argparse
import webbrowser
import qrcode
import uvicorn

from subkeep.config import get_settings


def print_qr_code(url: str) -> None:
    """Print a QR code of the API docs URL to the terminal."""
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=1,
        border=1,
    )
    qr.add_data(url)
    qr.make(fit=True)

    # Print QR code using ASCII
    qr.print_ascii(invert=True)


def main():
    parser = argparse.ArgumentParser(description="Subkeep API server")
    parser.add_argument("--port", type=int, default=8000, help="Port to run on")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    parser.add_argument("--open-docs", action="store_true", help="Open the API docs in a browser")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args()

    url = f"http://{args.host}:{args.port}"
    settings = get_settings()

    print("\n" + "=" * 50)
    print("  Subkeep")
    print("=" * 50)
    print(f"\n  URL:  {url}")
    print(f"  Docs: {url}/docs")
    print(f"  Data: {settings.database_path}\n")

    try:
        print_qr_code(f"{url}/docs")
    except Exception:
        pass  # QR code is optional

    print("\n  Press Ctrl+C to stop the server\n")
    print("=" * 50 + "\n")

    if args.open_docs:
        webbrowser.open(f"{url}/docs")

    uvicorn.run(
        "subkeep.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
