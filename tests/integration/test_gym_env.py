import numpy as np
import pytest

from coin_grid.actions import Action, GymAction
from coin_grid.config import CONFIG_REGISTRY
from coin_grid.gym_env import CoinGridEnv
from tests.test_utils import ORIGIN_CELL, find_cache, teleport


def make_env(**kwargs) -> CoinGridEnv:
    return CoinGridEnv(render_resolution=64, view_radius=3, **kwargs)


def test_reset_observation_layout() -> None:
    env = make_env()
    obs, info = env.reset()
    assert obs["image"].shape == (63, 63, 4)
    assert obs["image"].dtype == np.uint8
    assert obs["info"]["player"] == {"i": ORIGIN_CELL.i, "j": ORIGIN_CELL.j, "held_coin": 1}
    assert obs["info"]["status"]["phase"] == "ongoing"
    assert info == {"message": None}
    assert env.action_space.n == len(Action)


def test_move_step() -> None:
    env = make_env()
    env.reset()
    obs, reward, terminated, truncated, _ = env.step(np.int64(GymAction.UP))
    assert obs["info"]["player"]["i"] == ORIGIN_CELL.i + 1
    assert obs["info"]["status"]["turn"] == 1
    assert reward == 0.0
    assert not terminated and not truncated


def test_interact_rewards_coin_growth() -> None:
    env = make_env()
    env.reset()
    assert env.game is not None
    teleport(env.game, find_cache(env.config, value=1))
    _, reward, terminated, _, info = env.step(np.int64(GymAction.INTERACT))
    assert reward == 1.0
    assert not terminated
    assert info["message"] is not None


def test_invalid_action() -> None:
    env = make_env()
    with pytest.raises(ValueError):
        env.step(np.int64(len(Action)))


def test_reset_discards_progress() -> None:
    env = make_env()
    env.step(np.int64(GymAction.RIGHT))
    obs, _ = env.reset()
    assert obs["info"]["player"]["j"] == ORIGIN_CELL.j
    assert obs["info"]["status"]["touched"] == 0


def test_seeded_reset() -> None:
    env = make_env()
    obs, _ = env.reset(seed=7)
    assert obs["info"]["config"]["seed"] == 7
    assert env.state is not None and env.state.config.seed == 7


def test_named_config() -> None:
    env = make_env(config_name="dense")
    assert env.config == CONFIG_REGISTRY["dense"]
    with pytest.raises(ValueError):
        make_env(config_name="missing")


def test_render_texture() -> None:
    env = make_env()
    img = env.render()
    assert img is not None
    assert img.size == (63, 63)
