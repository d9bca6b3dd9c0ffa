# test_config.py
from fanbase.config import Settings


def test_env_file_is_read_and_unknown_keys_ignored(tmp_path, monkeypatch):
    monkeypatch.delenv("CRON_SECRET", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("CRON_SECRET=nightly\nNEXT_PUBLIC_ANALYTICS_ID=abc123\n")

    loaded = Settings(_env_file=str(env_file))

    assert loaded.cron_secret == "nightly"
    assert not hasattr(loaded, "next_public_analytics_id")
    assert Settings.model_config["extra"] == "ignore"


def test_defaults_apply_without_env_file(monkeypatch):
    monkeypatch.delenv("RATE_LIMIT_MAX_REQUESTS", raising=False)

    loaded = Settings(_env_file=None)

    assert loaded.rate_limit_max_requests == 3
    assert loaded.visit_throttle_seconds == 300
