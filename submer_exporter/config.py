# submer_exporter/config.py
from dataclasses import dataclass, field
from pathlib import Path
import configparser

from submer_exporter.errors import ConfigurationError


DEFAULT_API_URL = "http://localhost/api/realTime"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000


@dataclass
class SmartPodConfig:
    api_url: str = DEFAULT_API_URL
    timeout: float = 5.0
    poll_interval: float = 1.0


@dataclass
class ExporterConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


@dataclass
class LoggingConfig:
    console_level: str = "INFO"
    console_quiet: bool = False
    debug_modules: list[str] = field(default_factory=list)


@dataclass
class AppConfig:
    smartpod: SmartPodConfig
    exporter: ExporterConfig
    logging: LoggingConfig

    @classmethod
    def defaults(cls) -> "AppConfig":
        return cls(
            smartpod=SmartPodConfig(),
            exporter=ExporterConfig(),
            logging=LoggingConfig(),
        )


def apply_cli_overrides(cfg: AppConfig, args) -> AppConfig:
    """Copy explicitly passed CLI flags over file/default values."""
    if getattr(args, "host", None) is not None:
        cfg.exporter.host = args.host
    if getattr(args, "port", None) is not None:
        cfg.exporter.port = args.port
    if getattr(args, "api_url", None) is not None:
        cfg.smartpod.api_url = args.api_url
    _validate(cfg)
    return cfg


def _validate(cfg: AppConfig) -> None:
    if not cfg.smartpod.api_url:
        raise ConfigurationError("api_url must not be empty")
    if cfg.smartpod.timeout <= 0:
        raise ConfigurationError(f"timeout must be positive, got {cfg.smartpod.timeout}")
    if cfg.smartpod.poll_interval <= 0:
        raise ConfigurationError(
            f"poll_interval must be positive, got {cfg.smartpod.poll_interval}"
        )
    if not 0 <= cfg.exporter.port <= 65535:
        raise ConfigurationError(f"port out of range: {cfg.exporter.port}")


class Config:
    def __init__(self, path: str):
        self.path = Path(path)
        self.parser = configparser.ConfigParser(inline_comment_prefixes=("#",))
        try:
            read = self.parser.read(self.path)
        except (configparser.Error, UnicodeDecodeError) as exc:
            raise ConfigurationError(f"Cannot parse config file {self.path}: {exc}") from exc
        if not read:
            raise FileNotFoundError(f"Config file not found: {self.path}")

    @classmethod
    def load(cls, path: str) -> AppConfig:
        cfg = cls(path)

        p = cfg.parser

        def _as_bool(value: str) -> bool:
            return value.strip().lower() == "true"

        def _number(section: str, key: str, cast):
            raw = p[section][key]
            try:
                return cast(raw.strip())
            except ValueError as exc:
                raise ConfigurationError(f"[{section}] {key}: invalid value {raw!r}") from exc

        # --- SmartPod ---
        smartpod_kwargs = {}
        if "smartpod" in p:
            pod_sec = p["smartpod"]
            if "api_url" in pod_sec:
                smartpod_kwargs["api_url"] = pod_sec["api_url"].strip()
            if "timeout" in pod_sec:
                smartpod_kwargs["timeout"] = _number("smartpod", "timeout", float)
            if "poll_interval" in pod_sec:
                smartpod_kwargs["poll_interval"] = _number("smartpod", "poll_interval", float)
        smartpod = SmartPodConfig(**smartpod_kwargs)

        # --- Exporter ---
        exporter_kwargs = {}
        if "exporter" in p:
            exp_sec = p["exporter"]
            if "host" in exp_sec:
                exporter_kwargs["host"] = exp_sec["host"].strip()
            if "port" in exp_sec:
                exporter_kwargs["port"] = _number("exporter", "port", int)
        exporter = ExporterConfig(**exporter_kwargs)

        # --- Logging ---
        logging_kwargs = {}
        if "logging" in p:
            logging_sec = p["logging"]
            if "console_level" in logging_sec:
                logging_kwargs["console_level"] = logging_sec["console_level"]
            if "console_quiet" in logging_sec:
                logging_kwargs["console_quiet"] = _as_bool(logging_sec["console_quiet"])
            if "debug_modules" in logging_sec:
                raw = logging_sec["debug_modules"]
                logging_kwargs["debug_modules"] = [x.strip() for x in raw.split(",") if x.strip()]
        logging_cfg = LoggingConfig(**logging_kwargs)

        app_cfg = AppConfig(
            smartpod=smartpod,
            exporter=exporter,
            logging=logging_cfg,
        )
        _validate(app_cfg)
        return app_cfg
