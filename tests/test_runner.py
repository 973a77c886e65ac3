import gc
import threading
import weakref

import numpy as np
import pytest

from mini_fem import AnalysisRunner, ConfigurationError, SingularSystemError
import mini_fem.runner as runner_module


def test_latest_result_is_the_last_submission():
    with AnalysisRunner() as runner:
        runner.submit({"family": "bar", "E": 100e9})
        runner.submit({"family": "bar", "E": 200e9})
        runner.wait(timeout=30)
        assert runner.generation == 2
        assert runner.error is None
        assert runner.latest.material.E == 200e9


def test_stale_result_is_discarded(monkeypatch, caplog):
    gate = threading.Event()

    def fake_build(config):
        if config == "slow":
            gate.wait(timeout=10)
        return config

    monkeypatch.setattr(runner_module, "build_analysis", fake_build)
    with caplog.at_level("DEBUG", logger="mini_fem.runner"):
        with AnalysisRunner(max_workers=2) as runner:
            slow = runner.submit("slow")
            fast = runner.submit("fast")
            assert fast.result(timeout=10) == "fast"
            assert runner.latest == "fast"
            gate.set()
            assert slow.result(timeout=10) == "slow"
            assert runner.latest == "fast"
            assert runner.generation == 2
    assert "Discarding stale result of run 1" in caplog.text


def test_failed_run_publishes_error_without_result(caplog):
    with caplog.at_level("WARNING", logger="mini_fem.runner"):
        with AnalysisRunner() as runner:
            future = runner.submit({"family": "beam", "n_nodes": 4, "n_elements": 2})
            with pytest.raises(SingularSystemError):
                future.result(timeout=30)
            assert runner.latest is None
            assert isinstance(runner.error, SingularSystemError)
    assert "failed" in caplog.text


def test_success_after_failure_clears_error():
    with AnalysisRunner(max_workers=1) as runner:
        runner.submit({"family": "nope"})
        runner.submit({"family": "truss"})
        runner.wait(timeout=30)
        assert runner.error is None
        assert np.isclose(runner.latest.element_stress(4)[0], 20000.0)


def test_invalid_configuration_surfaces_as_error():
    with AnalysisRunner() as runner:
        runner.submit({"family": "bar", "n_elements": 0})
        runner.wait(timeout=30)
        assert isinstance(runner.error, ConfigurationError)
        assert runner.latest is None


def test_finished_runs_are_not_retained(monkeypatch):
    class Outcome:
        pass

    refs = []

    def fake_build(config):
        outcome = Outcome()
        refs.append(weakref.ref(outcome))
        return outcome

    monkeypatch.setattr(runner_module, "build_analysis", fake_build)
    runner = AnalysisRunner(max_workers=2)
    for i in range(30):
        runner.submit(i)
    runner.wait(timeout=30)
    runner.shutdown(wait=True)

    assert runner.pending == 0
    assert runner.generation == 30
    gc.collect()
    alive = [ref() for ref in refs if ref() is not None]
    assert alive == [runner.latest]
