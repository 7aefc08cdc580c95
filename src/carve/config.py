from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_APP_URL = "http://localhost:3000"
APP_URL_ENV = "CARVE_APP_URL"


@dataclass
class Paths:
    root: Path
    local_dir: Path
    conf_file: Path


@dataclass
class Settings:
    app_url: str = DEFAULT_APP_URL
    data_file: str = "data/carve.json"
    out_dir: str = "cards-out"
    port: int = 8421

    def data_path(self, root: Path) -> Path:
        return root / self.data_file

    def out_path(self, root: Path) -> Path:
        return root / self.out_dir


DEFAULT_CONF = f"""# carve local config (TOML)
app_url = "{DEFAULT_APP_URL}"
data_file = "data/carve.json"
out_dir = "cards-out"
port = 8421
"""


def _normalise_url(url: str) -> str:
    return url.strip().rstrip("/")


def load_settings(conf: Path, env: dict[str, str] | None = None) -> Settings:
    """Read settings from ``conf`` and apply the environment override.

    A missing or malformed file gives the defaults. ``CARVE_APP_URL`` wins
    over the file's ``app_url``.
    """
    env = os.environ if env is None else env
    settings = Settings()
    if conf.exists():
        try:
            data = tomllib.loads(conf.read_text(encoding="utf-8"))
            settings.app_url = str(data.get("app_url", settings.app_url))
            settings.data_file = str(data.get("data_file", settings.data_file))
            settings.out_dir = str(data.get("out_dir", settings.out_dir))
            settings.port = int(data.get("port", settings.port))
        except (tomllib.TOMLDecodeError, ValueError, TypeError) as exc:
            logger.warning("Ignoring malformed config %s: %s", conf, exc)
            settings = Settings()

    override = env.get(APP_URL_ENV)
    if override:
        settings.app_url = override
    settings.app_url = _normalise_url(settings.app_url) or DEFAULT_APP_URL
    return settings


def ensure_workspace(base: Path | None = None) -> tuple[Paths, Settings]:
    root = Path(base or os.getcwd())
    local = root / "local"
    conf = local / "carve.conf"

    local.mkdir(parents=True, exist_ok=True)
    if not conf.exists():
        conf.write_text(DEFAULT_CONF, encoding="utf-8")

    return Paths(root=root, local_dir=local, conf_file=conf), load_settings(conf)
