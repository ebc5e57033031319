"""Experiment I/O utilities for reproducible metadata and standardized output.

Provides helpers to:
- Collect experiment metadata (git SHA, timestamp, machine info, full config)
- Summarize per-episode returns
- Save results as JSON
"""

import json
import os
import platform
import subprocess
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

import numpy as np


def get_git_sha() -> Optional[str]:
    """Get current git SHA, or None if not in a git repo."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            capture_output=True, text=True, timeout=5
        )
    except (OSError, subprocess.SubprocessError):
        return None
    if result.returncode == 0:
        return result.stdout.strip()
    return None


def get_machine_info() -> Dict[str, str]:
    """Collect basic machine info."""
    return {
        "platform": platform.platform(),
        "python_version": platform.python_version(),
        "machine": platform.machine(),
    }


def build_metadata(config: Any, extra: Optional[Dict] = None) -> Dict[str, Any]:
    """Build a metadata dict from a config object.

    Parameters
    ----------
    config : dataclass or object
        Experiment config. Callable fields are stored by qualified name.
    extra : dict, optional
        Additional metadata to merge in (e.g., timing).
    """
    meta = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "git_sha": get_git_sha(),
        "machine": get_machine_info(),
        "config": serialize_config(config),
    }
    if extra:
        meta.update(extra)
    return meta


def serialize_config(config: Any) -> Dict[str, Any]:
    """Serialize a config object to a JSON-compatible dict."""
    if is_dataclass(config):
        fields = {k: getattr(config, k) for k in asdict(config)}
    else:
        fields = dict(getattr(config, "__dict__", {}))
    return {key: _serialize_value(val) for key, val in fields.items()}


def _serialize_value(val: Any) -> Any:
    """Make a value JSON-serializable."""
    if val is None or isinstance(val, (bool, int, float, str)):
        return val
    if callable(val):
        return f"{val.__module__}.{val.__qualname__}" if hasattr(val, "__qualname__") else str(val)
    if isinstance(val, dict):
        return {str(k): _serialize_value(v) for k, v in val.items()}
    if isinstance(val, (list, tuple)):
        return [_serialize_value(v) for v in val]
    if isinstance(val, np.integer):
        return int(val)
    if isinstance(val, np.floating):
        return float(val)
    if isinstance(val, np.ndarray):
        return val.tolist()
    return str(val)


def summarize_returns(returns: Sequence[float], window: int) -> Dict[str, float]:
    """Mean and spread of the last ``window`` episode returns."""
    tail = np.asarray(list(returns)[-window:], dtype=float)
    if tail.size == 0:
        return {"mean": 0.0, "std": 0.0, "p10": 0.0, "p90": 0.0, "episodes": 0}
    return {
        "mean": float(tail.mean()),
        "std": float(tail.std()),
        "p10": float(np.percentile(tail, 10)),
        "p90": float(np.percentile(tail, 90)),
        "episodes": int(tail.size),
    }


def save_experiment_results(
    path: str,
    results: Dict[str, Any],
    metadata: Dict[str, Any],
) -> None:
    """Save experiment results to JSON.

    Parameters
    ----------
    path : str
        Path for the JSON results file.
    results : dict
        The experiment results.
    metadata : dict
        Metadata from build_metadata().
    """
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

    output = {
        "metadata": metadata,
        "results": results,
    }
    with open(path, "w") as f:
        json.dump(output, f, indent=2, default=str)


def load_experiment_results(path: str) -> Dict[str, Any]:
    """Load a results file written by save_experiment_results."""
    with open(path) as f:
        return json.load(f)


def episode_rows(results) -> List[Dict[str, Any]]:
    """Flatten EpisodeResult objects into JSON rows."""
    return [
        {"episode": i, **asdict(r)}
        for i, r in enumerate(results)
    ]
