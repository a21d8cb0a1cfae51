"""
Telemetrie CSV de la simulation.

Une ligne par pas physique:
    t, x, y, theta, v, omega, err_lat, path_len, plan_ms

Les lignes sont bufferisees puis ajoutees au fichier via pandas.
"""

import os
import time
from typing import List, Optional

import pandas as pd


COLUMNS = ['t', 'x', 'y', 'theta', 'v', 'omega', 'err_lat', 'path_len', 'plan_ms']


def default_log_path(log_dir: str = "logs") -> str:
    """Chemin horodate: logs/run_YYYYmmdd_HHMMSS.csv"""
    return os.path.join(log_dir, f"run_{time.strftime('%Y%m%d_%H%M%S')}.csv")


class TelemetryLogger:
    """
    Enregistreur CSV.

    Usage:
        with TelemetryLogger(default_log_path()) as log:
            log.record(t, x, y, theta, v, omega, err, path_len, plan_ms)
    """

    def __init__(self, path: str, flush_every: int = 240):
        """
        Args:
            path: Fichier CSV de sortie (cree avec son dossier)
            flush_every: Nombre de lignes bufferisees avant ecriture
        """
        self.path = path
        self.flush_every = max(1, flush_every)
        self._rows: List[list] = []
        self._header_written = False
        self.rows_written = 0

        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        # Fichier avec en-tete meme si aucune ligne n'est ecrite
        self._write(pd.DataFrame(columns=COLUMNS))

    def record(self, t: float, x: float, y: float, theta: float,
               v: float, omega: float, err_lat: float,
               path_len: float, plan_ms: float):
        """Ajoute une ligne."""
        self._rows.append([t, x, y, theta, v, omega, err_lat, path_len, plan_ms])
        if len(self._rows) >= self.flush_every:
            self.flush()

    def flush(self):
        """Ecrit les lignes en attente."""
        if not self._rows:
            return
        frame = pd.DataFrame(self._rows, columns=COLUMNS)
        self._write(frame)
        self.rows_written += len(self._rows)
        self._rows = []

    def _write(self, frame: pd.DataFrame):
        frame.to_csv(
            self.path,
            mode='a' if self._header_written else 'w',
            header=not self._header_written,
            index=False
        )
        self._header_written = True

    def close(self):
        self.flush()
        print(f"[Telemetry] {self.rows_written} lignes ecrites dans {self.path}")

    def __enter__(self) -> 'TelemetryLogger':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


def load_telemetry(path: str) -> Optional[pd.DataFrame]:
    """Relit un fichier de telemetrie (None s'il n'existe pas)."""
    if not os.path.exists(path):
        return None
    return pd.read_csv(path)
