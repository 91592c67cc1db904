import io
import json
import logging
import os

import pytest

from agentflow.config import Settings
from agentflow.exceptions import RoutingError
from agentflow.utils import banner, last_message_content, runner, truncate_text
from agentflow.utils.logger import setup_logging


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    monkeypatch.setattr(runner, "setup_logging", lambda settings=None: None)


class TestRunScript:

    def test_success(self, settings):
        ran = []

        async def main():
            ran.append(True)

        assert runner.run_script(main, settings) == 0
        assert ran == [True]

    def test_failure_exits_non_zero(self, settings, capsys):
        async def main():
            raise RoutingError("agent", "nowhere", ["tools"])

        assert runner.run_script(main, settings) == 1
        assert "Error" in capsys.readouterr().err

    def test_tracing_exported_when_enabled(self, monkeypatch):
        for key in ("LANGCHAIN_TRACING_V2", "LANGCHAIN_API_KEY", "LANGCHAIN_PROJECT", "LANGCHAIN_ENDPOINT"):
            monkeypatch.delenv(key, raising=False)
        settings = Settings(_env_file=None, langsmith_tracing=True, langsmith_api_key="ls-key")

        runner.configure_tracing(settings)

        assert os.environ["LANGCHAIN_TRACING_V2"] == "true"
        assert os.environ["LANGCHAIN_API_KEY"] == "ls-key"

    def test_tracing_skipped_without_key(self, monkeypatch):
        monkeypatch.delenv("LANGCHAIN_TRACING_V2", raising=False)
        runner.configure_tracing(Settings(_env_file=None, langsmith_tracing=True))
        assert "LANGCHAIN_TRACING_V2" not in os.environ


class TestHelpers:

    def test_banner(self):
        assert banner("Title", width=5) == "=====\nTitle\n====="

    def test_last_message_content(self):
        class Msg:
            content = "last"

        assert last_message_content([Msg()]) == "last"
        assert last_message_content([]) is None

    def test_truncate_text(self):
        assert truncate_text("short", 10) == "short"
        assert truncate_text("a" * 20, 10) == "aaaaaaa..."


class TestSetupLogging:

    def test_json_format(self):
        stream = io.StringIO()
        root = logging.getLogger()
        saved = (root.level, list(root.handlers))
        try:
            setup_logging(Settings(_env_file=None, log_format="json", log_level="INFO"), stream=stream)
            logging.getLogger("agentflow.test").info("hello")
        finally:
            root.setLevel(saved[0])
            root.handlers[:] = saved[1]

        record = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert record["message"] == "hello"
        assert record["levelname"] == "INFO"
