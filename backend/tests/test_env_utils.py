from tweetfleet.env_utils import get_env


def test_get_env_prefers_plain_variable(monkeypatch, tmp_path):
    secret_file = tmp_path / "secret"
    secret_file.write_text("from-file\n", encoding="utf-8")
    monkeypatch.setenv("TF_TEST_SECRET", "from-env")
    monkeypatch.setenv("TF_TEST_SECRET_FILE", str(secret_file))

    assert get_env("TF_TEST_SECRET") == "from-env"


def test_get_env_reads_docker_secret_file(monkeypatch, tmp_path):
    secret_file = tmp_path / "secret"
    secret_file.write_text("  from-file\n", encoding="utf-8")
    monkeypatch.delenv("TF_TEST_SECRET", raising=False)
    monkeypatch.setenv("TF_TEST_SECRET_FILE", str(secret_file))

    assert get_env("TF_TEST_SECRET") == "from-file"


def test_get_env_falls_back_to_default(monkeypatch, tmp_path):
    monkeypatch.delenv("TF_TEST_SECRET", raising=False)
    monkeypatch.setenv("TF_TEST_SECRET_FILE", str(tmp_path / "missing"))

    assert get_env("TF_TEST_SECRET", "fallback") == "fallback"
