"""
Shared pytest fixtures for kubeplan tests.

This module provides common fixtures including:
- ProcessMocker: Mock subprocess calls with canned responses
- InMemoryStatusStore: Records status merge patches instead of calling the API
- Plan and context factories for reconciler tests
"""

import logging
import os
import sys
from dataclasses import dataclass
from typing import Callable, List, Optional, Pattern, Union
from unittest.mock import MagicMock, patch

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from kubeplan.config.provider import ControllerConfig
from kubeplan.modules.api.models import Plan, PlanStatus
from kubeplan.modules.executor import SubprocessRunner
from kubeplan.modules.reconciler import Context, StatusPatchError


# =============================================================================
# Process Mocking Infrastructure
# =============================================================================

@dataclass
class ProcessResponse:
    """Represents a mocked process outcome."""
    stdout: bytes = b""
    stderr: bytes = b""
    returncode: int = 0
    raises: Optional[Exception] = None

    def to_completed_process(self) -> MagicMock:
        """Convert to a subprocess.CompletedProcess-like mock."""
        result = MagicMock()
        result.stdout = self.stdout
        result.stderr = self.stderr
        result.returncode = self.returncode
        return result


@dataclass
class ProcessCall:
    """Record of a process spawn made during testing."""
    command: List[str]
    full_command_str: str
    matched_pattern: Optional[str] = None


class ProcessMocker:
    """
    Mock subprocess.run with pattern-matched responses.

    Usage:
        def test_failure(process_mocker):
            process_mocker.register("false", ProcessResponse(returncode=1))
            outcome = SubprocessRunner().run("false", [])
            assert process_mocker.call_count == 1
    """

    def __init__(self):
        self._responses: List[tuple] = []
        self._call_history: List[ProcessCall] = []
        self._default_response = ProcessResponse(
            raises=FileNotFoundError(2, "No such file or directory")
        )

    def register(
        self,
        pattern: Union[str, Pattern],
        response: ProcessResponse,
    ) -> "ProcessMocker":
        """
        Register a response for commands matching the pattern.

        Args:
            pattern: String (prefix match on the full command line) or regex
            response: ProcessResponse to return when matched

        Returns:
            self for chaining
        """
        self._responses.append((pattern, response))
        return self

    def set_default_response(self, response: ProcessResponse) -> "ProcessMocker":
        """Set the default response for unmatched commands."""
        self._default_response = response
        return self

    def mock_run(self, cmd: List[str], **kwargs) -> MagicMock:
        """Side effect for patching subprocess.run."""
        cmd_str = " ".join(cmd)
        matched_pattern = None
        response = self._default_response

        for pattern, resp in self._responses:
            if isinstance(pattern, str):
                if cmd_str.startswith(pattern):
                    matched_pattern = pattern
                    response = resp
                    break
            elif pattern.search(cmd_str):
                matched_pattern = pattern.pattern
                response = resp
                break

        self._call_history.append(
            ProcessCall(command=list(cmd), full_command_str=cmd_str, matched_pattern=matched_pattern)
        )

        if response.raises is not None:
            raise response.raises
        return response.to_completed_process()

    @property
    def calls(self) -> List[ProcessCall]:
        return self._call_history

    @property
    def call_count(self) -> int:
        return len(self._call_history)


@pytest.fixture
def process_mocker():
    """
    Fixture that provides a ProcessMocker with subprocess.run patched.

    Unregistered commands fail to spawn with ENOENT.
    """
    mocker = ProcessMocker()
    with patch("subprocess.run", side_effect=mocker.mock_run):
        yield mocker


# =============================================================================
# Status Store Double
# =============================================================================

class InMemoryStatusStore:
    """StatusStore that keeps the last patched status per object."""

    def __init__(self):
        self.statuses = {}
        self.patches: List[tuple] = []
        self.fail_with: Optional[Exception] = None

    def patch_status(self, name: str, namespace: str, status: PlanStatus) -> None:
        if self.fail_with is not None:
            raise StatusPatchError(name, namespace, self.fail_with)
        self.patches.append((name, namespace, status.to_patch()))
        self.statuses[(namespace, name)] = status.model_copy(deep=True)

    def get(self, name: str, namespace: str) -> Optional[PlanStatus]:
        return self.statuses.get((namespace, name))


@pytest.fixture
def status_store():
    return InMemoryStatusStore()


# =============================================================================
# Plans and Context
# =============================================================================

def plan_body(
    command: str = "true",
    args: Optional[List[str]] = None,
    retry_times: Optional[int] = None,
    status: Optional[dict] = None,
    name: str = "example",
    namespace: str = "default",
) -> dict:
    """Build a raw Plan object as the API server would return it."""
    instruction = {"command": command}
    if args is not None:
        instruction["args"] = args
    if retry_times is not None:
        instruction["retryTimes"] = retry_times

    body = {
        "apiVersion": "kube.rs/v1",
        "kind": "Plan",
        "metadata": {"name": name, "namespace": namespace, "uid": "uid-1234"},
        "spec": {"instruction": instruction},
    }
    if status is not None:
        body["status"] = status
    return body


@pytest.fixture
def make_plan() -> Callable[..., Plan]:
    """Factory for Plan models."""
    def _make(**kwargs) -> Plan:
        return Plan.from_body(plan_body(**kwargs))
    return _make


@pytest.fixture
def controller_config():
    return ControllerConfig(requeue_delay=1.0, max_workers=2)


@pytest.fixture
def context(controller_config, status_store):
    """Reconciler context with a real subprocess runner and in-memory store."""
    return Context(
        config=controller_config,
        store=status_store,
        runner=SubprocessRunner(),
        logger=logging.getLogger("kubeplan.tests"),
    )


# =============================================================================
# Test Markers Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "process_mock: Tests using mocked subprocess calls"
    )
    config.addinivalue_line(
        "markers", "integration: Tests spawning real processes"
    )
