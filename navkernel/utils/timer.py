"""
Wall-clock timing of named operations.

A ``Timer`` is owned by its caller; nothing in the numerical kernel records
into it implicitly.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

import numpy as np

logger = logging.getLogger(__name__)


@dataclass
class TimerRecord:
    """Durations recorded for one function name (milliseconds)."""

    func_name: str
    time_usage_in_ms: List[float] = field(default_factory=list)


class Timer:
    """Registry of named duration samples."""

    def __init__(self):
        self.records: Dict[str, TimerRecord] = {}

    def evaluate(self, func: Callable[[], Any], func_name: str) -> Any:
        """
        Run ``func`` and record its duration under ``func_name``.

        Returns:
            Whatever ``func`` returns
        """
        t1 = time.perf_counter_ns()
        result = func()
        t2 = time.perf_counter_ns()
        self.add(func_name, (t2 - t1) / 1e6)
        return result

    def add(self, func_name: str, time_used_ms: float):
        """Record a duration measured elsewhere."""
        record = self.records.setdefault(func_name, TimerRecord(func_name))
        record.time_usage_in_ms.append(time_used_ms)

    def get_mean_time(self, func_name: str) -> float:
        """Mean duration in milliseconds, 0.0 for an unknown name."""
        record = self.records.get(func_name)
        if record is None or not record.time_usage_in_ms:
            return 0.0
        return float(np.mean(record.time_usage_in_ms))

    def print_all(self):
        """Log call count, mean and extremes for every recorded name."""
        logger.info(">>> ===== Printing run time =====")
        for name, record in self.records.items():
            usage = record.time_usage_in_ms
            logger.info("> [ %s ] average time usage: %.3f ms, called times: %d, "
                        "min: %.3f ms, max: %.3f ms",
                        name, float(np.mean(usage)), len(usage), min(usage), max(usage))
        logger.info(">>> ===== Printing run time end =====")

    def dump_into_file(self, file_name: str):
        """
        Write all samples to a text file.

        The first line holds the names; each following line holds the i-th
        sample of every name (empty where a name has fewer samples).
        """
        with open(file_name, 'w') as f:
            names = list(self.records)
            f.write(",".join(names) + "\n")
            max_length = max((len(r.time_usage_in_ms) for r in self.records.values()),
                             default=0)
            for i in range(max_length):
                row = []
                for name in names:
                    usage = self.records[name].time_usage_in_ms
                    row.append(f"{usage[i]:.6f}" if i < len(usage) else "")
                f.write(",".join(row) + "\n")
        logger.info("Timer records dumped to %s", file_name)

    def clear(self):
        self.records.clear()
