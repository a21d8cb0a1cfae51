"""
Module de simulation pour tester la planification et le suivi sur PC.

Composants:
- VehiclePose / integrate: Modele cinematique unicycle
- Sandbox: Etat de simulation, replanification et pas physique fixe
- TelemetryLogger: Telemetrie CSV
"""

from .vehicle import VehiclePose, integrate, pose_at_cell
from .telemetry import TelemetryLogger, default_log_path, load_telemetry
from .sandbox import Sandbox, SimulationState, PlanResult, StepResult, PRESETS

__all__ = [
    'VehiclePose',
    'integrate',
    'pose_at_cell',
    'TelemetryLogger',
    'default_log_path',
    'load_telemetry',
    'Sandbox',
    'SimulationState',
    'PlanResult',
    'StepResult',
    'PRESETS',
]
