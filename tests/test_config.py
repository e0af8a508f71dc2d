import pytest

from kvraft.rpc.config import RpcConfig


def _write(tmp_path, text):
    path = tmp_path / "node.conf"
    path.write_text(text, encoding="utf-8")
    return path


def test_reads_key_value_pairs(tmp_path):
    path = _write(tmp_path, "rpcserverip=127.0.0.1\nrpcserverport=8000\n")
    config = RpcConfig()
    config.load_config_file(path)
    assert config.load("rpcserverip") == "127.0.0.1"
    assert config.load("rpcserverport") == "8000"


def test_trims_spaces_around_keys_and_values(tmp_path):
    path = _write(tmp_path, "   zookeeperip  =   10.0.0.1   \n")
    config = RpcConfig()
    config.load_config_file(path)
    assert config.load("zookeeperip") == "10.0.0.1"


def test_skips_comments_blank_and_invalid_lines(tmp_path):
    path = _write(tmp_path, "# note=ignored\n\n   \nno equals here\nname=value\n")
    config = RpcConfig()
    config.load_config_file(path)
    assert len(config) == 1
    assert "note" not in config
    assert config.load("name") == "value"


def test_first_value_wins(tmp_path):
    path = _write(tmp_path, "k=first\nk=second\n")
    config = RpcConfig()
    config.load_config_file(path)
    assert config.load("k") == "first"


def test_value_may_contain_equals(tmp_path):
    path = _write(tmp_path, "expr=a=b\n")
    config = RpcConfig()
    config.load_config_file(path)
    assert config.load("expr") == "a=b"


def test_last_line_without_newline(tmp_path):
    path = _write(tmp_path, "a=1\nb=2")
    config = RpcConfig()
    config.load_config_file(path)
    assert config.load("b") == "2"


def test_missing_key_gives_empty_string():
    assert RpcConfig().load("absent") == ""


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        RpcConfig().load_config_file(tmp_path / "missing.conf")