# submer_exporter/main.py

import sys

from submer_exporter.cli import build_parser
from submer_exporter.config import AppConfig, Config, apply_cli_overrides
from submer_exporter.errors import ConfigurationError
from submer_exporter.logging import ConsoleLog

from submer_exporter.services.metrics_server import MetricsServer
from submer_exporter.services.pod_metrics import PodMetrics
from submer_exporter.services.poller import Poller
from submer_exporter.services.smartpod_client import SmartPodClient


def load_config(args) -> AppConfig:
    app_cfg = Config.load(args.config) if args.config else AppConfig.defaults()
    return apply_cli_overrides(app_cfg, args)


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        app_cfg = load_config(args)
    except (FileNotFoundError, ConfigurationError) as exc:
        parser.error(str(exc))

    log = ConsoleLog(
        level="DEBUG" if args.debug else app_cfg.logging.console_level,
        quiet=args.quiet or app_cfg.logging.console_quiet,
        debug_modules=app_cfg.logging.debug_modules,
    ).setup()

    metrics = PodMetrics()
    client = SmartPodClient(app_cfg.smartpod, log)
    poller = Poller(client, metrics, log, interval=app_cfg.smartpod.poll_interval)

    try:
        server = MetricsServer(metrics, app_cfg.exporter.host, app_cfg.exporter.port, log)
    except OSError as exc:
        log.critical(
            "Cannot listen on %s:%d: %s",
            app_cfg.exporter.host,
            app_cfg.exporter.port,
            exc,
        )
        return 1

    poller.start()
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        log.info("Shutting down")
    finally:
        poller.stop(timeout=app_cfg.smartpod.timeout + app_cfg.smartpod.poll_interval)
        server.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())
