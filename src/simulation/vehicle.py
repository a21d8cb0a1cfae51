"""
Vehicule simule (modele unicycle).

Integre la pose du robot a partir des commandes (v, omega):
    x  += v * cos(theta) * dt
    y  += v * sin(theta) * dt
    theta = wrap(theta + omega * dt)
"""

import math
from dataclasses import dataclass
from typing import Tuple

from navigation.geometry import normalize_angle


@dataclass
class VehiclePose:
    """Pose du robot: position continue + cap en radians dans (-pi, pi]."""
    x: float = 1.5
    y: float = 1.5
    theta: float = 0.0

    @property
    def position(self) -> Tuple[float, float]:
        return self.x, self.y

    def copy(self) -> 'VehiclePose':
        return VehiclePose(self.x, self.y, self.theta)

    def distance_to(self, point: Tuple[float, float]) -> float:
        return math.hypot(point[0] - self.x, point[1] - self.y)


def pose_at_cell(cell: Tuple[int, int], theta: float = 0.0) -> VehiclePose:
    """Pose au centre d'une cellule de la grille."""
    return VehiclePose(cell[0] + 0.5, cell[1] + 0.5, theta)


def integrate(pose: VehiclePose, v: float, omega: float, dt: float) -> VehiclePose:
    """
    Met a jour la pose (Euler explicite). Modifie `pose` en place.

    Args:
        pose: Pose courante
        v: Vitesse lineaire
        omega: Vitesse angulaire (rad/s)
        dt: Pas de temps en secondes

    Returns:
        La meme instance, pour chainer
    """
    pose.x += v * math.cos(pose.theta) * dt
    pose.y += v * math.sin(pose.theta) * dt
    pose.theta = normalize_angle(pose.theta + omega * dt)
    return pose
