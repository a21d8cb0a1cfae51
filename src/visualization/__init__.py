"""
Visualization module.

- SandboxView: Interactive matplotlib window for the sandbox
- plot_plan: Static figure of a planned path (raw vs smoothed)
"""

from .sandbox_view import SandboxView
from .plan_plot import plot_plan
