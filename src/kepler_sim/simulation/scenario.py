from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from kepler_sim.objects.body import Body


@dataclass
class Scenario:
    """
    Container for all bodies in a simulation run.
    Keep this pure: just data + lookup, no stepping logic.
    """
    name: str
    bodies: Dict[str, Body] = field(default_factory=dict)

    def add_body(self, body: Body) -> None:
        if body.body_id in self.bodies:
            raise ValueError(f"Duplicate body ID: {body.body_id}")
        self.bodies[body.body_id] = body

    def body_list(self) -> List[Body]:
        return list(self.bodies.values())
