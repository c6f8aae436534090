class SchedulerError(Exception):
    """Base class for every error raised by the simulator."""


class ValidationError(SchedulerError, ValueError):
    """A process record, time quantum or algorithm name failed validation."""


class SimulationInvariantError(SchedulerError, RuntimeError):
    """A simulator reached a state that valid input can never produce."""
