from typing import Optional

import streamlit as st

from coin_grid.actions import Action
from coin_grid.game import CoinGame
from coin_grid.outcomes import Outcome
from coin_grid.types import CoinPhase

PHASE_ICONS = {
    CoinPhase.EMPTY: "🫳",
    CoinPhase.HOLDING: "🪙",
    CoinPhase.WON: "🏆",
}


def display_status(game: CoinGame) -> None:
    held = game.held_coin
    text = f"You have: Coin of value {held}" if held is not None else "Your hand is empty"
    st.info(text, icon=PHASE_ICONS[game.phase])
    position = game.position
    st.caption(f"Cell {position.key()} · {len(game.state.overlay)} caches emptied")
    if game.message:
        st.info(game.message, icon="💬")


def display_caches(game: CoinGame) -> None:
    st.text("Caches in reach")
    with st.container(height=300):
        reachable = [view for view in game.views if view.interactive]
        if not reachable:
            st.error("No caches in reach")
        for view in reachable:
            cols = st.columns([2, 1])
            with cols[0]:
                st.markdown(f"Cache at `{view.cell.key()}`: **{view.value}**")
            with cols[1]:
                if st.button(
                    "Pick up",
                    key=f"pickup_{view.cell.key()}",
                    disabled=view.value == 0,
                    use_container_width=True,
                ):
                    report_outcome(game.interact(view.cell))


def report_outcome(outcome: Optional[Outcome]) -> None:
    if outcome is None:
        return
    if outcome.accepted:
        st.toast(f"Now holding {outcome.value}", icon="🪙")
    else:
        st.toast(outcome.reason or "Rejected", icon="✋")


def do_action(game: CoinGame, action: Action) -> None:
    report_outcome(game.step(action))
