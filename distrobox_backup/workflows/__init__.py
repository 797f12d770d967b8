"""Container lifecycle workflows.

Each workflow is an ordered list of steps run by ``run_steps``:

    - backup: commit, save archive, remove temporary image
    - restore: load archive, identify image, create container, remove image
    - convert: stop, commit, remove original, create replacement, clean up
    - delete: force-remove after confirmation
"""

from .engine import WorkflowEngine
from .steps import Compensation, WorkflowStep, run_steps

__all__ = [
    "Compensation",
    "WorkflowEngine",
    "WorkflowStep",
    "run_steps",
]
