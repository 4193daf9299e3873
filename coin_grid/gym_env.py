"""Gymnasium environment wrapper for Coin Grid.

Provides a structured observation that pairs a rendered RGBA image of the
visibility window with an info dictionary (player, status, config). Reward is
the increase of the held coin value per step. ``terminated`` is ``True`` on
the step that reaches the victory value; episodes never truncate on their own
(wrap with ``TimeLimit`` if needed).

Observation schema:

``{"image": np.ndarray(H,W,4), "info": {"player": {...}, "status": {...}, "config": {...}}}``

Usage:

``env = CoinGridEnv(config_name="dense")``

Each ``reset`` starts a new game from in-memory storage, so episodes never
leak state into each other or onto disk.
"""

from dataclasses import replace

import gymnasium as gym
import numpy as np
from typing import Any, Dict, Optional, Tuple

from PIL.Image import Image as PILImage

from coin_grid.actions import Action
from coin_grid.config import CONFIG_REGISTRY, WorldConfig
from coin_grid.game import CoinGame
from coin_grid.persistence import MemoryStorage, PersistenceCodec
from coin_grid.renderer.texture import TextureRenderer
from coin_grid.state import State

ObsType = Dict[str, Any]


def player_observation_dict(state: State) -> Dict[str, Any]:
    """Player sub-observation; ``held_coin`` is -1 for an empty hand."""
    held = state.player.held_coin
    return {
        "i": int(state.player.position.i),
        "j": int(state.player.position.j),
        "held_coin": int(held) if held is not None else -1,
    }


def env_status_observation_dict(state: State) -> Dict[str, Any]:
    """Status portion of observation (phase, turn, touched cells)."""
    return {
        "phase": "win" if state.win else "ongoing",
        "turn": int(state.turn),
        "touched": len(state.overlay),
    }


def env_config_observation_dict(state: State) -> Dict[str, Any]:
    config = state.config
    return {
        "seed": config.seed if config.seed is not None else -1,
        "victory_value": config.victory_value,
        "neighborhood_size": config.neighborhood_size,
    }


class CoinGridEnv(gym.Env[ObsType, np.integer]):
    """Gymnasium ``Env`` implementation over :class:`CoinGame`.

    The action space is ``Discrete(len(Action))``; see :mod:`coin_grid.actions`.
    ``INTERACT`` targets the nearest interactive cache that still holds a coin.
    """

    metadata = {"render_modes": ["human", "texture"]}

    def __init__(
        self,
        render_mode: str = "texture",
        render_resolution: int = 256,
        view_radius: Optional[int] = 8,
        config: Optional[WorldConfig] = None,
        config_name: str = "default",
    ):
        """Create a new environment instance.

        Arguments:
            render_mode: "texture" to return PIL image frames, "human" to open a window.
            render_resolution: Width/height (pixels) of rendered image.
            view_radius: Chebyshev radius drawn in the observation image.
            config: Explicit world config; overrides ``config_name``.
            config_name: Key into ``CONFIG_REGISTRY``.
        """
        from gymnasium import spaces

        if config is None:
            if config_name not in CONFIG_REGISTRY:
                raise ValueError(f"Unknown config: {config_name}")
            config = CONFIG_REGISTRY[config_name]
        self.config = config
        self.game: Optional[CoinGame] = None
        self._render_mode = render_mode
        self._renderer = TextureRenderer(resolution=render_resolution, radius=view_radius)

        radius = view_radius if view_radius is not None else config.neighborhood_size
        span = 2 * radius + 1
        image_size = max(render_resolution // span, 1) * span

        def int_box(low: int, high: int) -> spaces.Box:
            return spaces.Box(
                low=np.array(low, dtype=np.int64),
                high=np.array(high, dtype=np.int64),
                shape=(),
                dtype=np.int64,
            )

        coord_bound = 2**62
        self.observation_space = spaces.Dict(
            {
                "image": spaces.Box(
                    low=0, high=255, shape=(image_size, image_size, 4), dtype=np.uint8
                ),
                "info": spaces.Dict(
                    {
                        "player": spaces.Dict(
                            {
                                "i": int_box(-coord_bound, coord_bound),
                                "j": int_box(-coord_bound, coord_bound),
                                "held_coin": int_box(-1, coord_bound),
                            }
                        ),
                        "status": spaces.Dict(
                            {
                                "phase": spaces.Text(max_length=32),
                                "turn": int_box(0, coord_bound),
                                "touched": int_box(0, coord_bound),
                            }
                        ),
                        "config": spaces.Dict(
                            {
                                "seed": int_box(-coord_bound, coord_bound),
                                "victory_value": int_box(1, coord_bound),
                                "neighborhood_size": int_box(0, 10_000),
                            }
                        ),
                    }
                ),
            }
        )
        self.action_space = spaces.Discrete(len(Action))

        self.reset()

    @property
    def state(self) -> Optional[State]:
        return self.game.state if self.game is not None else None

    def reset(
        self, *, seed: Optional[int] = None, options: Optional[Dict[str, object]] = None
    ) -> Tuple[ObsType, Dict[str, object]]:
        """Start a new game.

        Arguments:
            seed: When given, replaces the world seed for this episode.
            options: Gymnasium options (unused).
        """
        super().reset(seed=seed)
        config = self.config
        if seed is not None:
            config = replace(config, seed=seed)
        self.game = CoinGame(config=config, codec=PersistenceCodec(MemoryStorage()))
        return self._get_obs(), self._get_info()

    def step(
        self, action: np.integer
    ) -> Tuple[ObsType, float, bool, bool, Dict[str, object]]:
        """Apply one environment step.

        Returns:
            (observation, reward, terminated, truncated, info)
        """
        assert self.game is not None
        if action >= len(Action):
            raise ValueError("Invalid action:", action)
        step_action: Action = [a for a in Action][int(action)]

        prev_coin = self.game.held_coin or 0
        was_won = self.game.state.win
        self.game.step(step_action)
        reward = float((self.game.held_coin or 0) - prev_coin)
        terminated = self.game.state.win and not was_won
        return self._get_obs(), reward, terminated, False, self._get_info()

    def render(self, mode: Optional[str] = None) -> Optional[PILImage]:  # type: ignore
        """Render the current window.

        Args:
            mode: "human" to display, "texture" to return PIL image.
        """
        render_mode = mode or self._render_mode
        assert self.game is not None
        img = self._renderer.render(self.game.state, views=self.game.views)
        if render_mode == "human":
            img.show()
            return None
        elif render_mode == "texture":
            return img
        else:
            raise NotImplementedError(f"Render mode '{render_mode}' not supported.")

    def state_info(self) -> Dict[str, Dict[str, Any]]:
        """Return structured ``info`` sub-dict used in observations."""
        assert self.game is not None
        state = self.game.state
        return {
            "player": player_observation_dict(state),
            "status": env_status_observation_dict(state),
            "config": env_config_observation_dict(state),
        }

    def _get_obs(self) -> ObsType:
        assert self.game is not None
        img = self._renderer.render(self.game.state, views=self.game.views)
        return {"image": np.array(img), "info": self.state_info()}

    def _get_info(self) -> Dict[str, object]:
        assert self.game is not None
        return {"message": self.game.message}
