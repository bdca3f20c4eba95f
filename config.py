from __future__ import annotations

import configparser
import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from tsdecimate.downsampler import DEFAULT_MINMAX_RATIO, MinMaxLTTBDownsampler

LOG = logging.getLogger(__name__)


@dataclass
class DownsampleConfig:
    n_out: int = 1000
    minmax_ratio: int = DEFAULT_MINMAX_RATIO
    parallel: bool = False
    n_threads: int | None = None
    ini_path: Path | None = None

    @classmethod
    def load(cls, ini_path: str | Path | None = None) -> "DownsampleConfig":
        cfg = cls()
        path = Path(ini_path or "config.ini")
        if path.exists():
            parser = configparser.ConfigParser()
            parser.read(path)
            section = parser["minmaxlttb"] if "minmaxlttb" in parser else None
            if section:
                n_out = _get_int(section, "n_out", cfg.n_out)
                if n_out >= 3:
                    cfg.n_out = n_out
                else:
                    LOG.warning("Ignoring n_out=%s in %s; must be >= 3", n_out, path)
                ratio = _get_int(section, "minmax_ratio", cfg.minmax_ratio)
                if ratio >= 2:
                    cfg.minmax_ratio = ratio
                else:
                    LOG.warning("Ignoring minmax_ratio=%s in %s; must be >= 2", ratio, path)

            parallel_section = parser["parallel"] if "parallel" in parser else None
            if parallel_section:
                try:
                    cfg.parallel = parallel_section.getboolean("enabled", fallback=cfg.parallel)
                except ValueError:
                    LOG.warning("Ignoring invalid parallel.enabled in %s", path)
                threads = _get_int(parallel_section, "n_threads", 0)
                # 0 means one thread per CPU
                cfg.n_threads = threads if threads > 0 else None
        cfg.ini_path = path
        return cfg

    def downsample(self, *data, n_out: int | None = None) -> np.ndarray:
        return MinMaxLTTBDownsampler().downsample(
            *data,
            n_out=n_out or self.n_out,
            minmax_ratio=self.minmax_ratio,
            parallel=self.parallel,
            n_threads=self.n_threads,
        )

    def save(self) -> None:
        if self.ini_path is None:
            return
        parser = configparser.ConfigParser()
        parser["minmaxlttb"] = {
            "n_out": str(self.n_out),
            "minmax_ratio": str(self.minmax_ratio),
        }
        parser["parallel"] = {
            "enabled": "true" if self.parallel else "false",
            "n_threads": str(self.n_threads or 0),
        }
        with self.ini_path.open("w") as fh:
            parser.write(fh)


def _get_int(section: configparser.SectionProxy, key: str, fallback: int) -> int:
    try:
        return section.getint(key, fallback=fallback)
    except ValueError:
        LOG.warning("Ignoring non-integer %s=%r", key, section.get(key))
        return fallback
