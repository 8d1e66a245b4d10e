from biolens.config import Settings, load_settings


def test_defaults_without_files(tmp_path, clean_env):
    settings = load_settings(tmp_path / "missing.yaml", env_file=tmp_path / "missing.env")
    assert settings == Settings()


def test_yaml_values(tmp_path, clean_env):
    cfg = tmp_path / "settings.yaml"
    cfg.write_text("model: deepseek-reasoner\nport: 9001\nmax_batch_depth: 3\nbogus: 1\n", encoding="utf-8")
    settings = load_settings(cfg, env_file=tmp_path / "missing.env")
    assert settings.model == "deepseek-reasoner"
    assert settings.port == 9001
    assert settings.max_batch_depth == 3
    assert not hasattr(settings, "bogus")


def test_non_mapping_yaml_is_ignored(tmp_path, clean_env):
    cfg = tmp_path / "settings.yaml"
    cfg.write_text("- just\n- a list\n", encoding="utf-8")
    assert load_settings(cfg, env_file=tmp_path / "missing.env") == Settings()


def test_broken_yaml_is_ignored(tmp_path, clean_env):
    cfg = tmp_path / "settings.yaml"
    cfg.write_text("model: [unclosed\n", encoding="utf-8")
    assert load_settings(cfg, env_file=tmp_path / "missing.env") == Settings()


def test_environment_wins(tmp_path, clean_env, monkeypatch):
    cfg = tmp_path / "settings.yaml"
    cfg.write_text("model: from-yaml\nlog_level: DEBUG\n", encoding="utf-8")
    monkeypatch.setenv("DEEPSEEK_MODEL", "from-env")
    monkeypatch.setenv("DEEPSEEK_API_KEY", "sk-test")
    settings = load_settings(cfg, env_file=tmp_path / "missing.env")
    assert settings.model == "from-env"
    assert settings.api_key == "sk-test"
    assert settings.log_level == "DEBUG"


def test_dotenv_file(tmp_path, clean_env):
    env_file = tmp_path / ".env"
    env_file.write_text("DEEPSEEK_API_KEY=sk-dotenv\nDEEPSEEK_BASE_URL=http://localhost:9999\n", encoding="utf-8")
    settings = load_settings(tmp_path / "missing.yaml", env_file=env_file)
    assert settings.api_key == "sk-dotenv"
    assert settings.base_url == "http://localhost:9999"


def test_config_in_working_directory(tmp_path, clean_env, monkeypatch):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "settings.yaml").write_text("model: from-cwd\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    assert load_settings(env_file=tmp_path / "missing.env").model == "from-cwd"


def test_no_config_anywhere(tmp_path, clean_env, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("biolens.config.DEFAULT_CONFIG_PATH", tmp_path / "absent.yaml")
    assert load_settings(env_file=tmp_path / "missing.env") == Settings()
