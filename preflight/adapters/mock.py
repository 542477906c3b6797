"""
Mock runner — test double for every external command.

Records each command instead of executing it.  Succeeds by default;
individual programs can be made to fail, return canned output, or
trigger a side effect (e.g. dropping a fake ``cargo`` on disk when the
installer "runs").
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from preflight.adapters.base import CommandRunner
from preflight.core.models.action import Receipt


class MockRunner(CommandRunner):
    """Universal mock runner for testing.

    Responses and effects are keyed by a program name or argument: a
    key matches any command containing it as a whole token, so
    ``"apt-get"`` matches ``["sudo", "apt-get", "install", ...]``.
    """

    def __init__(
        self,
        runner_name: str = "mock",
        default_output: str = "",
    ):
        self._name = runner_name
        self._default_output = default_output
        self._responses: dict[str, Receipt] = {}
        self._effects: dict[str, Callable[[list[str]], None]] = {}
        self._call_log: list[list[str]] = []
        self._inputs: list[str | None] = []
        self._timeouts: list[int | None] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[list[str]]:
        """Every command this mock has received, in order."""
        return self._call_log

    @property
    def call_count(self) -> int:
        """Number of times run has been called."""
        return len(self._call_log)

    @property
    def inputs(self) -> list[str | None]:
        """The stdin text passed with each call."""
        return self._inputs

    @property
    def timeouts(self) -> list[int | None]:
        """The timeout passed with each call."""
        return self._timeouts

    def set_response(self, key: str, receipt: Receipt) -> None:
        """Return ``receipt`` for commands containing ``key``."""
        self._responses[key] = receipt

    def set_output(self, key: str, output: str) -> None:
        """Succeed with ``output`` for commands containing ``key``."""
        self._responses[key] = Receipt.success(
            runner=self._name, command=[key], output=output,
        )

    def set_failure(self, key: str, error: str = "Mock failure", returncode: int = 1) -> None:
        """Configure commands containing ``key`` to fail."""
        self._responses[key] = Receipt.failure(
            runner=self._name,
            command=[key],
            error=error,
            returncode=returncode,
        )

    def set_effect(self, key: str, effect: Callable[[list[str]], None]) -> None:
        """Call ``effect(command)`` whenever a command contains ``key``."""
        self._effects[key] = effect

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: str | None = None,
        search_path: str | None = None,
        input_text: str | None = None,
        capture: bool = False,
        timeout: int | None = None,
    ) -> Receipt:
        cmd = list(command)
        self._call_log.append(cmd)
        self._inputs.append(input_text)
        self._timeouts.append(timeout)

        for key, effect in self._effects.items():
            if key in cmd:
                effect(cmd)

        for key, receipt in self._responses.items():
            if key in cmd:
                return receipt.model_copy(update={"command": cmd})

        return Receipt.success(
            runner=self._name,
            command=cmd,
            output=self._default_output,
            metadata={"mock": True},
        )

    def reset(self) -> None:
        """Clear call log, responses and effects."""
        self._call_log.clear()
        self._inputs.clear()
        self._timeouts.clear()
        self._responses.clear()
        self._effects.clear()
