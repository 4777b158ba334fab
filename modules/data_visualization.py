# Data Visualization Module
# Charts for the demo property pages: scores, costs, equity and portfolio health

import streamlit as st
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
from datetime import datetime

SCORE_BANDS = [(85, "green"), (70, "gold"), (0, "red")]


def score_color(score):
    """Traffic-light color for a 0-100 health score"""
    for floor, color in SCORE_BANDS:
        if score >= floor:
            return color
    return "red"


def create_health_score_gauge(score, title="360° Property Score"):
    """Create a gauge for a property's health score"""
    if score is None:
        return None

    fig = go.Figure(go.Indicator(
        mode="gauge+number",
        value=score,
        title={'text': title},
        gauge={
            'axis': {'range': [0, 100]},
            'bar': {'color': score_color(score)},
            'steps': [
                {'range': [0, 70], 'color': '#f8d7da'},
                {'range': [70, 85], 'color': '#fff3cd'},
                {'range': [85, 100], 'color': '#d4edda'},
            ],
        }
    ))
    fig.update_layout(height=260, margin=dict(l=20, r=20, t=50, b=10))
    return fig


def create_score_breakdown_chart(breakdown):
    """Create a bar chart of the score components"""
    if not breakdown:
        return None

    df = pd.DataFrame(
        [{'component': k.title(), 'points': v} for k, v in breakdown.items()]
    )
    fig = px.bar(df, x='component', y='points', color='component', title="Score Breakdown")
    fig.update_layout(showlegend=False, height=320)
    return fig


def create_cost_comparison_chart(tasks_df):
    """Create a grouped bar chart of fix-now vs fix-later costs"""
    if tasks_df is None or tasks_df.empty or 'delayed_fix_cost' not in tasks_df.columns:
        return None

    df = tasks_df.dropna(subset=['delayed_fix_cost'])
    if df.empty:
        return None

    fig = go.Figure()
    fig.add_trace(go.Bar(name='Fix Now', x=df['title'], y=df['current_fix_cost'], marker_color='darkorange'))
    fig.add_trace(go.Bar(name='If Delayed', x=df['title'], y=df['delayed_fix_cost'], marker_color='firebrick'))
    fig.update_layout(
        title="Fix Now vs. Fix Later",
        yaxis_title="Cost ($)",
        barmode='group',
        height=400
    )
    return fig


def create_equity_projection_chart(current_equity, projected_equity, years=10):
    """Create a straight-line equity projection"""
    if not current_equity or not projected_equity:
        return None

    this_year = datetime.now().year
    step = (projected_equity - current_equity) / years
    df = pd.DataFrame({
        'year': [this_year + i for i in range(years + 1)],
        'equity': [current_equity + step * i for i in range(years + 1)],
    })

    fig = px.area(df, x='year', y='equity', title=f"{years}-Year Equity Projection")
    fig.update_layout(yaxis_title="Equity ($)", xaxis_title="Year", height=380)
    return fig


def create_portfolio_health_chart(properties_df):
    """Create a horizontal bar chart of health score per property"""
    if properties_df is None or properties_df.empty:
        return None

    names = properties_df['nickname'].tolist()
    scores = properties_df['health_score'].tolist()

    fig = go.Figure(go.Bar(
        y=names,
        x=scores,
        orientation='h',
        marker=dict(color=[score_color(s) for s in scores]),
        text=[str(s) for s in scores],
        textposition='inside',
        customdata=properties_df['door_count'].tolist(),
        hovertemplate='<b>%{y}</b><br>Score: %{x}<br>Doors: %{customdata}<extra></extra>'
    ))
    fig.update_layout(
        title="Portfolio Health",
        xaxis=dict(range=[0, 100], title="Health Score"),
        height=max(250, len(names) * 70),
        showlegend=False
    )
    return fig


def create_system_lifecycle_chart(systems_df, as_of_year=None):
    """Create a chart of remaining life per system"""
    if systems_df is None or systems_df.empty or 'installation_year' not in systems_df.columns:
        return None

    as_of_year = as_of_year or datetime.now().year
    df = systems_df.dropna(subset=['installation_year']).copy()
    if df.empty:
        return None
    df['age'] = as_of_year - df['installation_year'].astype(int)
    df['remaining'] = (df['estimated_lifespan_years'] - df['age']).clip(lower=0)

    fig = px.bar(
        df, x='remaining', y='nickname', orientation='h', color='condition',
        title="Remaining Useful Life (years)", hover_data=['age', 'estimated_lifespan_years']
    )
    fig.update_layout(height=max(250, len(df) * 45))
    return fig


def render_chart(fig, title):
    """Render a chart or a placeholder when there is nothing to plot"""
    if fig is None:
        st.info(f"No data available for {title}")
        return
    st.plotly_chart(fig, width="stretch")
