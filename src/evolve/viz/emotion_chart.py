"""
Plotly charts of a session's emotion scores.

Returns Plotly JSON for client-side rendering.
"""

from __future__ import annotations

from typing import Dict, List, Sequence

import plotly.graph_objects as go

from ..core.emotion import EmotionResult
from ..core.keywords import EMOTION_LABELS

EMOTION_LABELS_JA = {
    "joy": "喜び",
    "sadness": "悲しみ",
    "anger": "怒り",
    "fear": "不安",
    "surprise": "驚き",
    "disgust": "嫌悪",
    "neutral": "平常",
}

EMOTION_COLORS = {
    "joy": "#F5B041",
    "sadness": "#5DADE2",
    "anger": "#E74C3C",
    "fear": "#8E44AD",
    "surprise": "#48C9B0",
    "disgust": "#7F8C8D",
    "neutral": "#BDC3C7",
}


def create_emotion_radar(scores: Dict[str, float], title: str = "今の気持ち") -> str:
    """
    Radar chart of one message's emotion scores.

    Args:
        scores: Dict mapping emotion label -> intensity (unbounded above)
        title: Chart title

    Returns:
        JSON string for Plotly.js rendering
    """
    labels = [EMOTION_LABELS_JA[e] for e in EMOTION_LABELS]
    values = [scores.get(e, 0.0) for e in EMOTION_LABELS]

    # Close the polygon
    labels_closed = labels + [labels[0]]
    values_closed = values + [values[0]]

    fig = go.Figure()
    fig.add_trace(go.Scatterpolar(
        r=values_closed,
        theta=labels_closed,
        fill="toself",
        name="感情スコア",
        line=dict(color="#4A90D9", width=2),
        fillcolor="rgba(74, 144, 217, 0.25)",
        hovertemplate="%{theta}: %{r:.1f}<extra></extra>",
    ))

    fig.update_layout(
        polar=dict(
            radialaxis=dict(visible=True, range=[0, max(1.0, max(values))]),
            bgcolor="rgba(0, 0, 0, 0)",
        ),
        showlegend=False,
        title=dict(text=title, x=0.5, font=dict(size=16)),
        paper_bgcolor="rgba(0, 0, 0, 0)",
        margin=dict(t=60, b=40, l=60, r=60),
        height=400,
        width=450,
    )
    return fig.to_json()


def create_emotion_trend(emotions: Sequence[EmotionResult], title: str = "感情の推移") -> str:
    """Line chart with one trace per emotion across the session's user messages."""
    turns: List[int] = list(range(1, len(emotions) + 1))

    fig = go.Figure()
    for label in EMOTION_LABELS:
        fig.add_trace(go.Scatter(
            x=turns,
            y=[e.scores.get(label, 0.0) for e in emotions],
            mode="lines+markers",
            name=EMOTION_LABELS_JA[label],
            line=dict(color=EMOTION_COLORS[label], width=2),
        ))

    fig.update_layout(
        title=dict(text=title, x=0.5, font=dict(size=16)),
        xaxis=dict(title="メッセージ", dtick=1),
        yaxis=dict(title="スコア", rangemode="tozero"),
        legend=dict(orientation="h", yanchor="bottom", y=-0.3, xanchor="center", x=0.5),
        paper_bgcolor="rgba(0, 0, 0, 0)",
        plot_bgcolor="rgba(0, 0, 0, 0)",
        height=400,
    )
    return fig.to_json()
