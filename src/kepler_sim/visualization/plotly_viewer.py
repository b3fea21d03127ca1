from __future__ import annotations

import math
from pathlib import Path
from typing import List, Optional

import plotly.graph_objects as go

from kepler_sim.core.fixed_point import FixedPoint
from kepler_sim.core.frames import Z_AXIS, Vector3
from kepler_sim.physics.orbit import Orbit
from kepler_sim.simulation.engine import SimulationLog


def orbit_track(orbit: Orbit, n_samples: int = 360, normal: Vector3 = Z_AXIS) -> List[Vector3]:
    """Closed outline of the orbit, sampled evenly in true anomaly."""
    if n_samples < 3:
        raise ValueError("n_samples must be >= 3.")
    return [orbit.position(i * math.tau / n_samples, normal) for i in range(n_samples + 1)]


def _layout(fig: go.Figure, title: str) -> None:
    fig.update_layout(
        title=title,
        scene=dict(
            xaxis_title="X (km)",
            yaxis_title="Y (km)",
            zaxis_title="Z (km)",
            aspectmode="data",
        ),
        margin=dict(l=0, r=0, t=40, b=0),
        legend=dict(orientation="h"),
    )


def _primary_marker() -> go.Scatter3d:
    return go.Scatter3d(x=[0.0], y=[0.0], z=[0.0], mode="markers", name="Primary", marker=dict(size=8))


def render_orbit(
    orbit: Orbit,
    mass_kg: FixedPoint,
    out_html: str = "out/orbit.html",
    times_s: Optional[List[FixedPoint]] = None,
    n_samples: int = 360,
    normal: Vector3 = Z_AXIS,
) -> str:
    """
    Renders one orbit:
      - Primary at the origin
      - Orbit outline
      - Predicted positions at times_s (defaults to eight evenly spaced
        fractions of one period)
    """
    if times_s is None:
        period = orbit.orbital_period(mass_kg)
        times_s = [period * i / 8 for i in range(8)]

    track = orbit_track(orbit, n_samples, normal)

    fig = go.Figure()
    fig.add_trace(_primary_marker())
    fig.add_trace(go.Scatter3d(
        x=[r[0] for r in track], y=[r[1] for r in track], z=[r[2] for r in track],
        mode="lines",
        name="orbit",
    ))

    positions = []
    last = None
    for t in times_s:
        angle = orbit.predict(mass_kg, t, last)
        last = (t, angle)
        positions.append(orbit.position(angle, normal))

    fig.add_trace(go.Scatter3d(
        x=[r[0] for r in positions], y=[r[1] for r in positions], z=[r[2] for r in positions],
        mode="markers+text",
        text=[f"{int(t)}s" for t in times_s],
        name="predicted",
        marker=dict(size=4),
    ))

    _layout(fig, "Orbit prediction")

    Path(out_html).parent.mkdir(parents=True, exist_ok=True)
    fig.write_html(out_html, auto_open=False)
    return out_html


def render_static_scene(log: SimulationLog, out_html: str = "out/scene.html") -> str:
    """
    Renders a static 3D scene:
      - Primary at the origin
      - Recorded track for each body
      - Last position marker for each body
    """
    if not log.positions_km:
        raise ValueError("No body positions found in log.")

    fig = go.Figure()
    fig.add_trace(_primary_marker())

    for body_id, samples in log.positions_km.items():
        xs = [r[0] for (_t, r) in samples]
        ys = [r[1] for (_t, r) in samples]
        zs = [r[2] for (_t, r) in samples]

        fig.add_trace(go.Scatter3d(x=xs, y=ys, z=zs, mode="lines", name=f"{body_id} track"))
        fig.add_trace(go.Scatter3d(
            x=[xs[-1]], y=[ys[-1]], z=[zs[-1]],
            mode="markers",
            name=f"{body_id} now",
            marker=dict(size=5),
        ))

    _layout(fig, "Scenario playback (static scene)")

    Path(out_html).parent.mkdir(parents=True, exist_ok=True)
    fig.write_html(out_html, auto_open=False)
    return out_html
