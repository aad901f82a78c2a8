# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""
Command-line share client.

    echo "secret" | python bin/share.py send --ttl 3600
    python bin/share.py open "https://notes.example.com/AbCdEfGhIjKl~key"

Text is encrypted on this machine; only ciphertext is uploaded.
"""

import argparse
import sys
import os

# ---------------------------------------------------------------------------
# Path setup so backend modules are importable
# ---------------------------------------------------------------------------
_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
_BACKEND_DIR  = os.path.join(_PROJECT_ROOT, "backend")
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)

from client.share import DEFAULT_TTL, ShareClient      # noqa: E402
from core.errors import (                               # noqa: E402
    EnvelopeError,
    ExchangeError,
    InvalidRequest,
    RecordExpired,
    RecordNotFound,
)


def _parse_args(argv):
    parser = argparse.ArgumentParser(prog="share", description="Share text through an expiring encrypted link.")
    parser.add_argument("--api-url", default=None, help="API base URL (default: API_URL setting)")
    sub = parser.add_subparsers(dest="command", required=True)

    send = sub.add_parser("send", help="encrypt text from stdin (or --text) and print the share URL")
    send.add_argument("--text", default=None)
    send.add_argument("--ttl", type=int, default=DEFAULT_TTL, help="seconds until the link expires")
    send.add_argument("--password", default=None, help="omit to generate a random one")

    open_ = sub.add_parser("open", help="fetch and decrypt a share URL")
    open_.add_argument("url")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = _parse_args(argv)
    with ShareClient(args.api_url) as client:
        try:
            if args.command == "send":
                text = args.text if args.text is not None else sys.stdin.read()
                print(client.share(text, ttl=args.ttl, password=args.password))
            else:
                print(client.open(args.url), end="")
        except RecordNotFound:
            print("[share] Text not found.", file=sys.stderr)
            return 1
        except RecordExpired:
            print("[share] Text has expired.", file=sys.stderr)
            return 1
        except EnvelopeError:
            # One message for every decryption failure
            print("[share] Wrong key or corrupted data.", file=sys.stderr)
            return 1
        except (InvalidRequest, ExchangeError) as exc:
            print(f"[share] {exc}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
