#!/usr/bin/env python3
"""
Impact Site launcher: local dev server with reload, plus a WSGI export.

- Local dev:             ./run.py --env development
- Local dev (no reload): ./run.py --env development --no-reload
- Routes dump:           ./run.py --routes-out routes.json
- Gunicorn:              gunicorn "wsgi:app"
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import socket
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from impactsite import create_app
from impactsite.config import CONFIG_BY_NAME

log = logging.getLogger("impactsite.run")


# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
class ColorFormatter(logging.Formatter):
    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[1;41m",
        "RESET": "\033[0m",
    }

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        c = self.COLORS.get(record.levelname, "")
        return f"{c}{base}{self.COLORS['RESET']}"


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        obj = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            obj["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(obj)


def setup_logging(debug: bool, style: str) -> None:
    style = (os.getenv("LOG_STYLE") or style).lower()
    handler = logging.StreamHandler(sys.stdout)

    if style == "json":
        handler.setFormatter(JsonFormatter())
    elif style == "plain" or not sys.stdout.isatty():
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    else:
        handler.setFormatter(ColorFormatter("%(asctime)s %(levelname)s %(message)s"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)


# -----------------------------------------------------------------------------
# CLI
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class RunnerConfig:
    env: str
    host: str
    port: int
    debug: bool
    use_reloader: bool
    log_style: str
    routes_out: Optional[Path]


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Run the Impact Site development server.")
    p.add_argument("--env", choices=sorted(k for k in CONFIG_BY_NAME if k != "base"), default=None)
    p.add_argument("--host", default=os.getenv("HOST", "127.0.0.1"))
    p.add_argument("--port", type=int, default=int(os.getenv("PORT", "5000")))
    p.add_argument("--debug", action=argparse.BooleanOptionalAction, default=None)
    p.add_argument("--no-reload", action="store_true", help="Disable the Werkzeug reloader.")
    p.add_argument("--log-style", choices=["color", "json", "plain"], default="color")
    p.add_argument("--routes-out", type=Path, default=None)
    return p.parse_args(argv)


def make_runner_config(argv: Optional[list[str]] = None) -> RunnerConfig:
    args = parse_args(argv)
    env = (args.env or os.getenv("APP_ENV") or os.getenv("ENV") or "development").strip().lower()
    if env not in CONFIG_BY_NAME:
        env = "development"
    debug = args.debug if args.debug is not None else env != "production"
    return RunnerConfig(
        env=env,
        host=args.host,
        port=args.port,
        debug=debug,
        use_reloader=debug and not args.no_reload,
        log_style=args.log_style,
        routes_out=args.routes_out,
    )


def _port_in_use(host: str, port: int) -> bool:
    probe_host = "127.0.0.1" if host in {"0.0.0.0", "::"} else host
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.settimeout(0.35)
        return s.connect_ex((probe_host, port)) == 0


def banner(cfg: RunnerConfig) -> None:
    print(f"\033[1;33m✨ {datetime.now():%Y-%m-%d %H:%M:%S}: Starting Impact Site...\033[0m")
    print(f"🔎 ENV:        {cfg.env}")
    print(f"🐞 DEBUG:      {cfg.debug}")
    print(f"♻️  RELOAD:     {cfg.use_reloader}")
    print(f"🌎 Host:Port:  {cfg.host}:{cfg.port}")
    print(f"🐍 Python:     {sys.version.split()[0]}")


def print_routes(app, out_path: Optional[Path]) -> None:
    rows = [
        {
            "rule": str(rule),
            "endpoint": rule.endpoint,
            "methods": sorted((rule.methods or set()) - {"HEAD", "OPTIONS"}),
        }
        for rule in sorted(app.url_map.iter_rules(), key=lambda r: str(r))
    ]
    if out_path:
        out_path.write_text(json.dumps(rows, indent=2), encoding="utf-8")
        print(f"\n📝 Routes written to: {out_path}")
    else:
        print("\n🔗 Routes:")
        for r in rows:
            print(f"  {r['rule']} → {r['endpoint']} ({','.join(r['methods'])})")


def main(argv: Optional[list[str]] = None) -> int:
    load_dotenv(override=False)
    cfg = make_runner_config(argv)
    setup_logging(cfg.debug, cfg.log_style)

    app = create_app(cfg.env)
    if cfg.routes_out is not None:
        print_routes(app, cfg.routes_out)
        return 0

    # The reloader child re-runs main(); only the parent checks the port.
    if not os.environ.get("WERKZEUG_RUN_MAIN") and _port_in_use(cfg.host, cfg.port):
        log.error("Port %s is already in use on %s", cfg.port, cfg.host)
        return 1

    banner(cfg)
    if cfg.debug:
        print_routes(app, None)
    app.run(host=cfg.host, port=cfg.port, debug=cfg.debug, use_reloader=cfg.use_reloader)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
