"""Engine error taxonomy. Routers map these to HTTP status codes."""


class ScenarioEngineError(Exception):
    """Base class for all engine errors."""

    code = "ScenarioEngineError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_detail(self) -> dict:
        return {"error": self.code, "message": self.message}


class ScenarioNotFound(ScenarioEngineError):
    code = "ScenarioNotFound"

    def __init__(self, scenario_id: int):
        super().__init__(f"Scenario {scenario_id} not found")
        self.scenario_id = scenario_id


class SessionNotFound(ScenarioEngineError):
    code = "SessionNotFound"

    def __init__(self, session_id: str):
        super().__init__(f"Session {session_id} not found")
        self.session_id = session_id


class StepMismatch(ScenarioEngineError):
    """Submitted step does not match the authoritative session state.

    Carries the stored step and status so the caller can resynchronize.
    """

    code = "StepMismatch"

    def __init__(self, current_step: int, status: str, submitted_step: int | None = None, message: str | None = None):
        if message is None:
            message = f"Step {submitted_step} does not match current step {current_step} (status {status})"
        super().__init__(message)
        self.current_step = current_step
        self.status = status
        self.submitted_step = submitted_step

    def to_detail(self) -> dict:
        detail = super().to_detail()
        detail["currentStep"] = self.current_step
        detail["status"] = self.status
        return detail


class SessionAlreadyTerminal(StepMismatch):
    code = "SessionAlreadyTerminal"

    def __init__(self, current_step: int, status: str, submitted_step: int | None = None):
        super().__init__(
            current_step,
            status,
            submitted_step,
            message=f"Session is already {status}; no further changes are accepted",
        )


class SessionIncomplete(ScenarioEngineError):
    code = "SessionIncomplete"

    def __init__(self, current_step: int, total_steps: int):
        super().__init__(f"Session has answered {current_step - 1} of {total_steps} steps")
        self.current_step = current_step
        self.total_steps = total_steps

    def to_detail(self) -> dict:
        detail = super().to_detail()
        detail["currentStep"] = self.current_step
        detail["totalSteps"] = self.total_steps
        return detail


class EvaluatorUnavailable(ScenarioEngineError):
    """Evaluator failed after the retry budget, or returned an unusable verdict."""

    code = "EvaluatorUnavailable"


class InsufficientData(ScenarioEngineError):
    """Aggregation requested over an empty score list. Indicates a controller bug."""

    code = "InsufficientData"
