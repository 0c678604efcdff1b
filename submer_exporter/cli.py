# submer_exporter/cli.py
import argparse

from submer_exporter.config import DEFAULT_API_URL, DEFAULT_HOST, DEFAULT_PORT


def build_parser():
    parser = argparse.ArgumentParser(
        prog="submer-pod-exporter",
        description="Prometheus exporter for Submer smart pod."
    )

    # Defaults stay None so explicit flags can override the config file.
    parser.add_argument(
        "--host",
        default=None,
        help=f"Listening host (default: {DEFAULT_HOST})"
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help=f"Listening port (default: {DEFAULT_PORT})"
    )

    parser.add_argument(
        "--api-url",
        dest="api_url",
        default=None,
        help=f"Submer smartpod API URL (default: {DEFAULT_API_URL})"
    )

    parser.add_argument(
        "--config",
        default=None,
        help="Optional path to an INI configuration file"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable verbose debug logging"
    )

    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress console log output"
    )

    return parser
