"""
Analytics module for derived readouts and visualization.
"""

from .readouts import (
    analyze_harmonics,
    calculate_readouts,
    calculate_thd,
    measure_window,
    safety_alerts,
    voltage_standard,
)

from .plots import (
    plot_scope_window,
    plot_transient_history,
)

__all__ = [
    "analyze_harmonics",
    "calculate_readouts",
    "calculate_thd",
    "measure_window",
    "safety_alerts",
    "voltage_standard",
    "plot_scope_window",
    "plot_transient_history",
]
