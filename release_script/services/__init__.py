# SPDX-License-Identifier: MIT
"""Release pipeline services.

Services implement the release stages, coordinating between the domain layer
(release/) and infrastructure (platform/, git/).
"""

from release_script.services.gateway import ExecutionGateway, PlannedStep
from release_script.services.orchestrator import ReleaseOrchestrator, ReleaseOutcome

__all__ = [
    "ExecutionGateway",
    "PlannedStep",
    "ReleaseOrchestrator",
    "ReleaseOutcome",
]
