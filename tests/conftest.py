import pytest


@pytest.fixture(autouse=True)
def _isolated_log(tmp_path, monkeypatch):
    monkeypatch.setenv("PR_DECORATION_LOG_PATH", str(tmp_path / "pr-decoration.log"))
    for name in ("INPUT_POSTTOCONVERSATION", "INPUT_PULLREQUESTAPPROVAL", "PR_DECORATION_CONFIG_PATH"):
        monkeypatch.delenv(name, raising=False)
