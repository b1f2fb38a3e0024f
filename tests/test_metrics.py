import pytest

from sandbox_ci import metrics


def sample(name, labels):
    return metrics.registry.get_sample_value(name, labels) or 0


def test_track_notification_counts_errors():
    labels = {"provider": "github", "kind": "status", "error_type": "RuntimeError"}
    before = sample("sandbox_ci_notification_errors_total", labels)

    with pytest.raises(RuntimeError):
        with metrics.track_notification("github", "status"):
            raise RuntimeError("boom")

    assert sample("sandbox_ci_notification_errors_total", labels) == before + 1


def test_track_notification_observes_duration():
    labels = {"provider": "bitbucket", "kind": "comment"}
    before = sample("sandbox_ci_notification_duration_seconds_count", labels)

    with metrics.track_notification("bitbucket", "comment"):
        pass

    assert sample("sandbox_ci_notification_duration_seconds_count", labels) == before + 1


def test_write_metrics(tmp_path):
    path = tmp_path / "sandbox_ci.prom"
    metrics.sandbox_steps_total.labels("success").inc()

    metrics.write_metrics(str(path))

    assert "sandbox_ci_sandbox_steps_total" in path.read_text()
