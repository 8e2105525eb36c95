"""Utility functions for sample buffer processing"""

import numpy as np


def calculate_stats(samples):
    """Calculate basic statistics for a sample array"""
    samples = np.asarray(samples, dtype=np.float64)
    min_val = float(np.min(samples))
    max_val = float(np.max(samples))

    return {
        "mean": float(np.mean(samples)),
        "min": min_val,
        "max": max_val,
        "std": float(np.std(samples)),
        "rms": float(np.sqrt(np.mean(samples**2))),
        "peak_to_peak": max_val - min_val,
    }
