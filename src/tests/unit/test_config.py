"""Tests for configuration helpers."""

import pytest
import yaml

from shard_balancer import BalancerConfig, InvalidConfigError, dump_config, load_config


def test_defaults():
    cfg = load_config(None)
    assert cfg == BalancerConfig()
    assert cfg.slop == 0.0
    assert cfg.random_seed is None
    assert cfg.log_plans is False


def test_dump_and_load_round_trip(tmp_path):
    path = tmp_path / "conf" / "balancer.yaml"
    cfg = BalancerConfig(slop=0.2, random_seed=11, log_plans=True)

    dump_config(cfg, path)

    assert yaml.safe_load(path.read_text()) == {
        "slop": 0.2,
        "random_seed": 11,
        "log_plans": True,
    }
    assert load_config(path) == cfg


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == BalancerConfig()


@pytest.mark.parametrize(
    "content",
    [
        "slop: 1.5\n",
        "slop: not-a-number\n",
        "- just\n- a list\n",
        "slop: [unclosed\n",
    ],
)
def test_invalid_config(tmp_path, content):
    path = tmp_path / "bad.yaml"
    path.write_text(content)
    with pytest.raises(InvalidConfigError) as exc_info:
        load_config(path)
    assert exc_info.value.path == path.resolve()


def test_missing_file(tmp_path):
    with pytest.raises(InvalidConfigError):
        load_config(tmp_path / "missing.yaml")
