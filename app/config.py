import os
from dataclasses import dataclass, replace

import streamlit as st

from coin_grid.config import CONFIG_REGISTRY, WorldConfig
from coin_grid.game import CoinGame
from coin_grid.persistence import FileStorage, PersistenceCodec
from coin_grid.sensor import UnavailableSensor

DEFAULT_SAVE_PATH = os.environ.get("COIN_GRID_SAVE", "coin_grid_save.json")


@dataclass(frozen=True)
class AppConfig:
    preset: str
    save_path: str
    view_radius: int
    world: WorldConfig


def _initial_config() -> AppConfig:
    return AppConfig(
        preset="default",
        save_path=DEFAULT_SAVE_PATH,
        view_radius=10,
        world=CONFIG_REGISTRY["default"],
    )


def set_default_config() -> None:
    if "config" not in st.session_state:
        st.session_state["config"] = _initial_config()


def get_config_from_widgets() -> AppConfig:
    current: AppConfig = st.session_state["config"]

    st.subheader("World")
    names = list(CONFIG_REGISTRY.keys())
    preset: str = st.selectbox(
        "Preset", names, index=names.index(current.preset), key="preset_select"
    )
    world = CONFIG_REGISTRY[preset]
    seed: int = st.number_input(
        "World seed (0 = classic world)",
        min_value=0,
        value=current.world.seed or 0,
        key="world_seed",
    )
    world = replace(world, seed=seed or None)

    st.subheader("Display")
    view_radius: int = st.slider(
        "View radius (cells)", 3, world.neighborhood_size, min(current.view_radius, world.neighborhood_size), key="view_radius"
    )

    st.subheader("Storage")
    save_path: str = st.text_input("Save file", value=current.save_path, key="save_path")

    return AppConfig(preset=preset, save_path=save_path, view_radius=view_radius, world=world)


def make_game(config: AppConfig) -> CoinGame:
    """Create the engine for ``config`` and keep it in the session."""
    game = CoinGame(
        config=config.world,
        codec=PersistenceCodec(FileStorage(config.save_path), key=config.world.storage_key),
        sensor=UnavailableSensor(),
    )
    st.session_state["game"] = game
    return game
