# app.py
from __future__ import annotations

import logging
import sys
from pathlib import Path

import numpy as np

from config import DownsampleConfig

LOG = logging.getLogger(__name__)


def load_series(path: str | Path, x_column: int | None = None, y_column: int = -1):
    """Load ``(x, y)`` from a ``.npy`` or ``.csv`` file; ``x`` may be ``None``."""
    path = Path(path)
    if path.suffix.lower() == ".npy":
        data = np.load(path)
    elif path.suffix.lower() == ".csv":
        data = _load_csv(path)
    else:
        raise ValueError(f"Unsupported input format: {path.suffix or path.name}")

    if data.ndim == 1:
        if x_column is not None:
            raise ValueError("x column requested but input has a single column")
        return None, data
    if data.ndim != 2:
        raise ValueError("input must be one- or two-dimensional")
    if x_column is None and data.shape[1] == 2 and y_column in (-1, 1):
        x_column = 0
    x = data[:, x_column] if x_column is not None else None
    return x, data[:, y_column]


def _load_csv(path: Path) -> np.ndarray:
    with path.open() as fh:
        first = fh.readline()
    try:
        [float(part) for part in first.strip().split(",") if part.strip()]
        skip = 0
    except ValueError:
        skip = 1
    data = np.loadtxt(path, delimiter=",", skiprows=skip, dtype=np.float64, ndmin=2)
    if data.shape[1] == 1:
        return data[:, 0]
    return data


def main(
    path,
    *,
    config_path: str | None = None,
    n_out: int | None = None,
    minmax_ratio: int | None = None,
    parallel: bool | None = None,
    n_threads: int | None = None,
    x_column: int | None = None,
    y_column: int = -1,
    output: str | None = None,
) -> np.ndarray:
    cfg = DownsampleConfig.load(config_path)
    if n_out is not None:
        cfg.n_out = n_out
    if minmax_ratio is not None:
        cfg.minmax_ratio = minmax_ratio
    if parallel is not None:
        cfg.parallel = parallel
    if n_threads is not None and n_threads > 0:
        cfg.n_threads = n_threads

    x, y = load_series(path, x_column=x_column, y_column=y_column)
    data = (y,) if x is None else (x, y)
    indices = cfg.downsample(*data)
    LOG.info("Selected %d of %d samples from %s", indices.size, y.size, path)

    lines = "\n".join(str(int(i)) for i in indices)
    if output:
        Path(output).write_text(lines + "\n")
    else:
        sys.stdout.write(lines + "\n")
    return indices


if __name__ == "__main__":
    import argparse
    p = argparse.ArgumentParser(description="Downsample a series with MinMaxLTTB")
    p.add_argument("input", help=".npy or .csv file")
    p.add_argument("--config")
    p.add_argument("--n-out", type=int)
    p.add_argument("--minmax-ratio", type=int)
    p.add_argument("--parallel", action="store_true", default=None)
    p.add_argument("--threads", type=int)
    p.add_argument("--x-column", type=int)
    p.add_argument("--y-column", type=int, default=-1)
    p.add_argument("--output")
    p.add_argument("-v", "--verbose", action="store_true")
    args = p.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    main(
        args.input,
        config_path=args.config,
        n_out=args.n_out,
        minmax_ratio=args.minmax_ratio,
        parallel=args.parallel,
        n_threads=args.threads,
        x_column=args.x_column,
        y_column=args.y_column,
        output=args.output,
    )
