from config import _env, get_config

def test_env_casts(monkeypatch):
    monkeypatch.setenv("MT103_TEST_FLAG", "yes")
    monkeypatch.setenv("MT103_TEST_PORT", "8080")
    monkeypatch.setenv("MT103_TEST_BAD", "eighty")
    assert _env("MT103_TEST_FLAG", False, bool) is True
    assert _env("MT103_TEST_PORT", 3000, int) == 8080
    assert _env("MT103_TEST_BAD", 3000, int) == 3000
    assert _env("MT103_TEST_MISSING") is None

def test_config_is_cached():
    assert get_config() is get_config()
    assert get_config().api.max_request_mb > 0
