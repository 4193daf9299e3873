import logging

import streamlit as st
from pyrsistent import thaw

from config import AppConfig, get_config_from_widgets, make_game, set_default_config
from components import display_caches, display_status, do_action
from coin_grid.actions import Action
from coin_grid.game import CoinGame
from coin_grid.logging_utils import configure_logging
from coin_grid.persistence import snapshot_to_dict
from coin_grid.renderer.texture import TextureRenderer

st.set_page_config(layout="wide", page_title="Coin Grid")
st.markdown(
    """
    <style>
        header, footer, #MainMenu { visibility: hidden; }
        .stMainBlockContainer { padding-top: 0; padding-bottom: 0; }
        .stToastContainer { align-items: center; }
    </style>
""",
    unsafe_allow_html=True,
)

if "logging_configured" not in st.session_state:
    configure_logging(logging.INFO)
    st.session_state["logging_configured"] = True


# --------- Main App ---------

set_default_config()
tab_game, tab_config, tab_state = st.tabs(["Game", "Config", "State"])

with tab_config:
    config: AppConfig = get_config_from_widgets()
    if st.button("Save", key="save_config_btn", use_container_width=True):
        st.session_state["config"] = config
        make_game(config)
    st.divider()

with tab_game:
    if "game" not in st.session_state:
        make_game(st.session_state["config"])
    game: CoinGame = st.session_state["game"]
    current: AppConfig = st.session_state["config"]

    left_col, middle_col, right_col = st.columns([0.25, 0.5, 0.25])

    with right_col:
        if st.button("🔁 New Game", key="reset_btn", use_container_width=True):
            game.reset()

        _, up_col, _ = st.columns([1, 1, 1])
        with up_col:
            if st.button("⬆️", key="up_btn", use_container_width=True):
                do_action(game, Action.UP)
        left_btn, down_btn, right_btn = st.columns([1, 1, 1])
        with left_btn:
            if st.button("⬅️", key="left_btn", use_container_width=True):
                do_action(game, Action.LEFT)
        with down_btn:
            if st.button("⬇️", key="down_btn", use_container_width=True):
                do_action(game, Action.DOWN)
        with right_btn:
            if st.button("➡️", key="right_btn", use_container_width=True):
                do_action(game, Action.RIGHT)
        if st.button("🤲 Nearest", key="interact_btn", use_container_width=True):
            do_action(game, Action.INTERACT)

        st.divider()
        use_location = st.toggle("Use device location", key="use_location")
        if use_location and not game.sensor_active:
            if not game.enable_sensor():
                st.warning("Location unavailable; arrow buttons still work.", icon="📡")
        elif not use_location and game.sensor_active:
            game.disable_sensor()
        game.pump()

        with st.form("teleport_form"):
            lat = st.number_input("Latitude", value=current.world.origin[0], format="%.6f")
            lng = st.number_input("Longitude", value=current.world.origin[1], format="%.6f")
            if st.form_submit_button("📍 Go to location", use_container_width=True):
                # one-off absolute fix, then back to the active strategy
                previous = game.movement
                game.set_movement("absolute")
                game.move_to_absolute(lat, lng)
                game.set_movement(previous)

    with left_col:
        display_status(game)
        display_caches(game)

    with middle_col:
        if game.state.win:
            st.success("🎉 **You win!** 🎉")
        renderer = TextureRenderer(resolution=640, radius=current.view_radius)
        img = renderer.render(game.state, views=game.views)
        st.image(img.convert("P"), use_container_width=True)

with tab_state:
    st.json(thaw(game.state.description), expanded=1)
    st.json(snapshot_to_dict(game.snapshot()), expanded=1)
