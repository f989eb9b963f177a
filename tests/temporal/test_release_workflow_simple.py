"""Simple tests for Temporal workflow types and wiring."""

import pytest

from changeset_release.temporal.shared import ReleaseWorkflowParams, ReleaseWorkflowResult


class TestWorkflowDataClasses:
    def test_params_defaults(self) -> None:
        params = ReleaseWorkflowParams(repo="demo", clone_url="https://example.com/demo.git")

        assert params.branch_name is None
        assert params.use_ai is False
        assert params.max_attempts == 1
        assert params.timeout_minutes == 10

    def test_activity_payload_defaults_branch(self) -> None:
        params = ReleaseWorkflowParams(
            repo="demo", clone_url="https://example.com/demo.git", message="Adds X."
        )

        payload = params.to_activity_payload()

        assert payload["branch_name"] == "release-demo"
        assert payload["message"] == "Adds X."
        assert "max_attempts" not in payload

    def test_activity_payload_keeps_custom_branch(self) -> None:
        params = ReleaseWorkflowParams(
            repo="demo", clone_url="https://example.com/demo.git", branch_name="release/next"
        )

        assert params.to_activity_payload()["branch_name"] == "release/next"

    def test_result_minimal(self) -> None:
        result = ReleaseWorkflowResult(success=False, message="Workflow failed: boom")

        assert result.success is False
        assert result.changeset_id is None
        assert result.commit_sha is None


class TestWorkflowWiring:
    def test_workflow_import(self) -> None:
        from changeset_release.temporal.workflows import ReleaseWorkflow

        workflow = ReleaseWorkflow()
        assert callable(workflow.run)

    def test_worker_registers_release_activity(self) -> None:
        from changeset_release.temporal.worker import ReleaseWorker

        worker = ReleaseWorker(max_workers=2)
        assert worker.max_workers == 2
        assert worker.running is False


class TestTemporalConfig:
    def test_conflicting_auth_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from changeset_release.temporal import config

        monkeypatch.setattr(config, "TEMPORAL_API_KEY", "key")
        monkeypatch.setattr(config, "TEMPORAL_TLS_CERT", "cert.pem")
        monkeypatch.setattr(config, "TEMPORAL_TLS_KEY", "key.pem")

        with pytest.raises(config.TemporalConfigError, match="both mTLS and API key"):
            config.validate_configuration()

    def test_incomplete_mtls_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from changeset_release.temporal import config

        monkeypatch.setattr(config, "TEMPORAL_API_KEY", "")
        monkeypatch.setattr(config, "TEMPORAL_TLS_CERT", "cert.pem")
        monkeypatch.setattr(config, "TEMPORAL_TLS_KEY", "")

        with pytest.raises(config.TemporalConfigError, match="Both TEMPORAL_TLS_CERT"):
            config.validate_configuration()

    def test_configuration_summary_masks_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from changeset_release.temporal import config

        monkeypatch.setattr(config, "TEMPORAL_API_KEY", "secret-key")

        summary = config.get_configuration_summary()

        assert summary["auth_method"] == "api_key"
        assert summary["api_key_set"] is True
        assert "secret-key" not in str(summary)
