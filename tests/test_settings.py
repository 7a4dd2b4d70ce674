from codesandbox.settings import load_settings


def test_yaml_is_layered_over_env(tmp_path, monkeypatch):
    monkeypatch.setenv("SBX_EXECUTION_TIMEOUT_MS", "1234")
    monkeypatch.setenv("SBX_MAX_CONCURRENCY", "7")
    conf = tmp_path / "sandbox.yaml"
    conf.write_text(
        "workspace_root: /srv/sandbox\n"
        "defaults:\n"
        "  execution_timeout_ms: 2000\n"
        "  simulate_latency: false\n"
        "runtimes:\n"
        "  node: /opt/node/bin/node\n"
        "evaluator:\n"
        "  kind: static\n"
    )
    s = load_settings(str(conf))
    assert s.execution_timeout_ms == 2000
    assert s.max_concurrency == 7
    assert s.simulate_latency is False
    assert str(s.workspace_root) == "/srv/sandbox"
    assert s.runtime("node") == "/opt/node/bin/node"
    assert s.runtime("javac") == "javac"
    assert s.evaluator == "static"
    assert s.limits().execution_timeout_ms == 2000


def test_malformed_blocks_fall_back_to_defaults(tmp_path):
    conf = tmp_path / "sandbox.yaml"
    conf.write_text(
        "defaults: [1, 2]\n"
        "runtimes: oops\n"
        "evaluator: 3\n"
        "logging:\n"
        "  level: DEBUG\n"
    )
    s = load_settings(str(conf))
    assert s.execution_timeout_ms == 10_000
    assert s.compile_timeout_ms == 10_000
    assert s.max_output_bytes == 1_048_576
    assert s.runtimes == {}
    assert s.evaluator == "none"
    assert s.log_level == "DEBUG"


def test_non_mapping_document_is_ignored(tmp_path):
    conf = tmp_path / "sandbox.yaml"
    conf.write_text("- just\n- a list\n")
    assert load_settings(str(conf)).max_concurrency == 4


def test_conf_path_from_env(tmp_path, monkeypatch):
    conf = tmp_path / "other.yaml"
    conf.write_text("defaults:\n  compile_timeout_ms: 45000\n")
    monkeypatch.setenv("SANDBOX_CONF", str(conf))
    assert load_settings().compile_timeout_ms == 45000


def test_missing_file_means_defaults(tmp_path):
    s = load_settings(str(tmp_path / "absent.yaml"))
    assert s.command_timeout_ms == 5_000
    assert s.kill_grace_s == 2.0
