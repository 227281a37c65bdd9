import argparse
import logging
import sys

from . import __version__
from .client import HttpClient
from .config import ClientConfig
from .errors import ClientError
from .headers import Headers
from .http_protocol import HttpRequest


def parse_header(value: str) -> tuple[str, str]:
    name, sep, content = value.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"Invalid header '{value}', expected 'Name: value'.")
    return name.strip(), content.strip()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="sockhttp", description="Send one HTTP/1.1 request over a raw socket.")

    parser.add_argument("url", help="Absolute URL to request (http:// or https://).")
    parser.add_argument("-X", "--method", default=None, help="Request method (default GET, or POST with --data).")
    parser.add_argument("-H", "--header", action="append", type=parse_header, default=[], help="Extra request header, 'Name: value'.")
    parser.add_argument("-d", "--data", default=None, help="Request body; '@path' reads it from a file.")
    parser.add_argument("--timeout", type=float, default=None, help="Connect and read timeout in seconds.")
    parser.add_argument("--insecure", action="store_false", dest="verify", help="Skip TLS certificate verification.")
    parser.add_argument("--tls13", action="store_true", help="Require TLS 1.3.")
    parser.add_argument("-i", "--include", action="store_true", help="Print the status line and headers.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log protocol activity to stderr.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.set_defaults(verify=True)

    return parser.parse_args(argv)


def build_request(args) -> HttpRequest:
    body = b""
    if args.data is not None:
        if args.data.startswith("@"):
            with open(args.data[1:], "rb") as f:
                body = f.read()
        else:
            body = args.data.encode("utf-8")

    method = args.method or ("POST" if args.data is not None else "GET")
    return HttpRequest(method=method, url=args.url, headers=Headers(args.header), body=body)


def main(argv=None) -> int:
    args = parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)

    overrides = {"verify_certificate": args.verify}
    if args.timeout is not None:
        overrides["connect_timeout"] = args.timeout
    if args.tls13:
        overrides["tls_min_version"] = "TLSv1.3"

    client = HttpClient(ClientConfig.from_env(**overrides))

    try:
        request = build_request(args)
    except OSError as e:
        print(f"sockhttp: cannot read request body: {e}", file=sys.stderr)
        return 1

    try:
        with client.send_request(request) as response:
            if args.include:
                sys.stdout.write(f"HTTP/{response.version} {response.status_code} {response.reason}\r\n")
                for name, values in response.headers.items():
                    for value in values:
                        sys.stdout.write(f"{name}: {value}\r\n")
                sys.stdout.write("\r\n")
                sys.stdout.flush()

            for chunk in response.body:
                sys.stdout.buffer.write(chunk)
            sys.stdout.buffer.flush()
    except ClientError as e:
        print(f"sockhttp: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
