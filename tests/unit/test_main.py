import asyncio
import logging

import main
from core.models.release import ReleaseResult


class TestCommandLine:
    """Test cases for the ha-release entry point."""

    def test_parse_short_flags(self):
        args = main.parse_arguments(
            ["-a", "web-asg", "-r", "eu-west-1", "-o", "AKIA", "-s", "secret",
             "-t", "600", "-e", "15", "-v"]
        )

        assert args.group == "web-asg"
        assert args.region == "eu-west-1"
        assert args.access_key == "AKIA"
        assert args.secret_key == "secret"
        assert args.inservice_time_allowed == 600
        assert args.elb_timeout == 15
        assert args.verbose is True
        assert args.config is None

    def test_unset_timings_are_left_to_configuration(self):
        args = main.parse_arguments(["--group", "web-asg"])

        assert args.inservice_time_allowed is None
        assert args.elb_timeout is None
        assert args.verbose is False

    def test_missing_group_is_a_configuration_error(self, monkeypatch, capsys):
        monkeypatch.delenv("HA_RELEASE_GROUP_NAME", raising=False)

        exit_code = asyncio.run(main.main([]))

        assert exit_code == 2
        assert "group name is required" in capsys.readouterr().err

    def test_summary_is_logged_for_any_failure(self, monkeypatch, caplog):
        result = ReleaseResult(group_name="web-asg")
        result.mark_started()
        result.mark_failed(None, RuntimeError("throttled"))

        class FailingController:
            last_result = result

            async def execute(self):
                raise RuntimeError("throttled")

        async def create(*args):
            return FailingController()

        monkeypatch.setattr(main, "configure_logging", lambda *args: None)
        monkeypatch.setattr(main.ReleaseController, "create", create)
        monkeypatch.delenv("HA_RELEASE_GROUP_NAME", raising=False)
        caplog.set_level(logging.INFO)

        exit_code = asyncio.run(main.main(["--group", "web-asg", "--region", "eu-west-1"]))

        assert exit_code == 1
        assert f"Release ID: {result.release_id}" in caplog.text
        assert "Status: failed" in caplog.text
