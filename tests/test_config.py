import pytest

from xiu.config import (
    Config,
    ConfigError,
    HlsConfig,
    HttpFlvConfig,
    LogConfig,
    RtmpPullConfig,
    RtmpPushConfig,
    load,
    loads,
)

FULL = """
[rtmp]
enabled = true
port = 1935

[[rtmp.push]]
enabled = true
address = "localhost"
port = 1936

[[rtmp.push]]
enabled = false
address = "localhost"
port = 1937

[rtmp.pull]
enabled = false
address = "localhost"
port = 1938

[httpflv]
enabled = true
port = 8081

[hls]
enabled = false
port = 8080

[log]
level = "debug"
"""


def test_full_config():
    cfg = loads(FULL)
    assert cfg.rtmp.enabled is True
    assert cfg.rtmp.port == 1935
    assert cfg.rtmp.push == [
        RtmpPushConfig(enabled=True, address="localhost", port=1936),
        RtmpPushConfig(enabled=False, address="localhost", port=1937),
    ]
    assert cfg.rtmp.pull == RtmpPullConfig(enabled=False, address="localhost", port=1938)
    assert cfg.httpflv == HttpFlvConfig(enabled=True, port=8081)
    assert cfg.hls == HlsConfig(enabled=False, port=8080)
    assert cfg.log == LogConfig(level="debug")


def test_empty_config_has_no_sections():
    assert loads("") == Config()


def test_optional_relays_default_to_none():
    cfg = loads("[rtmp]\nenabled = true\nport = 1935\n")
    assert cfg.rtmp.pull is None
    assert cfg.rtmp.push is None


def test_unknown_fields_are_ignored():
    cfg = loads("[hls]\nenabled = true\nport = 8080\nextra = 1\n")
    assert cfg.hls == HlsConfig(enabled=True, port=8080)


@pytest.mark.parametrize(
    "text",
    [
        "[hls]\nport = 8080\n",
        "[hls]\nenabled = 1\nport = 8080\n",
        "[hls]\nenabled = true\nport = \"8080\"\n",
        "[rtmp.pull]\nenabled = true\naddress = \"localhost\"\nport = 70000\n",
        "[log]\nlevel = 3\n",
        "[rtmp]\nenabled = true\nport = 1935\npush = 5\n",
        "not toml = = =",
    ],
)
def test_invalid_config_raises(text):
    with pytest.raises(ConfigError):
        loads(text)


def test_load_from_file(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(FULL, encoding="utf-8")
    assert load(str(path)) == loads(FULL)


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(ConfigError):
        load(str(tmp_path / "missing.toml"))