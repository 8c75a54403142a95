# app.py
import json
import logging
import streamlit as st
import plotly.graph_objects as go

from game import Game
from store import LevelStore

CANVAS = (800.0, 600.0)

logging.basicConfig(level=logging.INFO)

st.set_page_config(page_title="Untangle (Web)", layout="wide")

# Session state
if 'game' not in st.session_state:
    g = Game(CANVAS, LevelStore())
    g.initialize()
    st.session_state.game = g

g: Game = st.session_state.game

# Reveal lasts a single rerun
if g.is_revealing():
    g.hide_solution()

col_btns, col_plot = st.columns([1, 4], gap="large")

with col_btns:
    st.markdown("### Controls")
    if st.button("New Game"):
        g.new_game()
    if st.button("Restart Level"):
        g.restart_level()
    if st.button("Next Level", disabled=not g.is_completed):
        g.next_level()
    reveal = st.button("Show Solution")
    st.divider()

    # Move a node by coordinates (stands in for dragging)
    ids = [n.getId() for n in g.nodes]
    if ids:
        label = st.selectbox("Node", [str(i + 1) for i in ids], key="node")
        node_id = int(label) - 1
        current = next(n for n in g.nodes if n.getId() == node_id)
        cx, cy = current.pos_tuple()
        x = st.slider("x", 0.0, CANVAS[0], float(cx), key=f"x{g.current_level}-{node_id}")
        y = st.slider("y", 0.0, CANVAS[1], float(cy), key=f"y{g.current_level}-{node_id}")
        if st.button("Move Node"):
            g.start_drag(node_id)
            g.drag(node_id, (x, y))
            if g.end_drag(node_id):
                st.balloons()
    st.divider()

    stats = g.get_stats()
    st.markdown(
        f"Level: {stats['level']}  \n"
        f"Nodes: {stats['nodes']}, Edges: {stats['edges']}  \n"
        f"Target degree: {stats['target_degree']}  \n"
        f"Crossings: {stats['crossings']}  \n"
        f"Solved: {'yes' if stats['solved'] else 'no'}"
    )
    st.download_button("Download Save", json.dumps(g.store.to_dict(), indent=2),
                       file_name="untangle.json", mime="application/json")

if reveal and g.show_solution():
    st.info("Showing the solution. It disappears on the next interaction.")

# --------- Build Plotly figure ----------
with col_plot:
    fig = go.Figure()
    positions = {n.getId(): n.pos_tuple() for n in g.nodes}

    for e in g.edges:
        (x1, y1), (x2, y2) = positions[e.getFrom()], positions[e.getTo()]
        color = '#ff4444' if e.isCrossing() else '#666666'
        fig.add_trace(go.Scatter(
            x=[x1, x2], y=[y1, y2],
            mode='lines',
            line=dict(color=color, width=3 if e.isCrossing() else 2),
            hoverinfo='skip',
            showlegend=False
        ))

    vx = []; vy = []; txt = []
    for n in g.nodes:
        x, y = n.pos_tuple()
        vx.append(x); vy.append(y)
        txt.append(str(n.getId() + 1))

    fig.add_trace(go.Scatter(
        x=vx, y=vy, mode='markers+text',
        text=txt, textposition='middle center',
        marker=dict(size=28, color='#48dbfb', line=dict(width=2, color='#3498db')),
        hoverinfo='skip',
        showlegend=False
    ))

    fig.update_xaxes(range=[0, CANVAS[0]])
    # Canvas y grows downwards
    fig.update_yaxes(range=[CANVAS[1], 0], scaleanchor="x", scaleratio=1)
    fig.update_layout(
        margin=dict(l=20, r=20, t=10, b=10),
        xaxis=dict(visible=False), yaxis=dict(visible=False),
        dragmode='pan', height=700
    )
    st.plotly_chart(fig, use_container_width=True)
