# Page Views
# Renders canonical pages and every demo variant from the active demo dataset

import streamlit as st

from modules.data_visualization import (
    create_cost_comparison_chart,
    create_equity_projection_chart,
    create_health_score_gauge,
    create_portfolio_health_chart,
    create_score_breakdown_chart,
    create_system_lifecycle_chart,
    render_chart,
)
from modules.runtime import get_runtime
from modules.ui_components import (
    go_to,
    render_alert_banner,
    render_data_table,
    render_metric_cards,
    render_navigation_sidebar,
    render_page_header,
    score_alert,
    tour_button,
    tour_target,
)
from shared.logging import get_logger
from shared.navigation import canonical_for, profile_for_page

logger = get_logger(__name__)

# Page visits that raise a specific engagement popup
ENGAGEMENT_TRIGGERS = {
    "Score360": "health_score_viewed",
    "Inspect": "inspection_completed",
    "Prioritize": "priorities_viewed",
    "Preserve": "lifecycle_viewed",
    "Schedule": "seasonal_viewed",
}


def _money(value):
    return f"${value:,.0f}" if value is not None else "n/a"


def render_dashboard(dataset):
    if dataset.properties:
        metrics = dataset.portfolio_metrics
        render_metric_cards({
            "properties": metrics["total_properties"],
            "doors": metrics["total_units"],
            "portfolio_value": _money(metrics["total_value"]),
            "net_cash_flow": _money(metrics["net_cash_flow"]),
        })
        render_chart(create_portfolio_health_chart(dataset.frame("properties")), "Portfolio Health")
        return

    prop = dataset.property
    col1, col2 = st.columns(2)
    with col1:
        render_chart(create_health_score_gauge(prop["health_score"]), "Health Score")
        tour_button("💚 Health Score details", "health-score", width="stretch")
    with col2:
        st.metric("Disasters Prevented", _money(prop.get("estimated_disasters_prevented", 0)))
        st.metric("Spent on Maintenance", _money(prop.get("total_maintenance_spent", 0)))
        tour_button("💰 Prevented Costs", "prevented-costs", width="stretch")

    render_metric_cards({
        "systems": dataset.stats.get("total_systems", len(dataset.systems)),
        "good": dataset.stats.get("systems_good", 0),
        "flagged": dataset.stats.get("systems_flagged", 0),
        "urgent": dataset.stats.get("systems_urgent", 0),
    })


def render_properties(dataset):
    tour_target("property-card", "Property profile")
    if dataset.properties:
        for prop in dataset.properties:
            with st.container(border=True):
                st.markdown(f"### {prop['nickname']}")
                st.caption(f"{prop['address']}, {prop['city']} {prop['state']} · {prop['property_type']}")
                render_metric_cards({
                    "doors": prop["door_count"],
                    "health": prop["health_score"],
                    "value": _money(prop["current_value"]),
                    "equity": _money(prop["equity"]),
                })
        return

    prop = dataset.property
    with st.container(border=True):
        st.markdown(f"### {prop['address']}")
        st.caption(f"{prop['city']}, {prop['state']} {prop['zip_code']} · {prop['property_type']}")
        render_metric_cards({
            "year_built": prop.get("year_built"),
            "square_feet": prop.get("square_footage"),
            "bedrooms": prop.get("bedrooms"),
            "baseline_complete": f"{prop.get('baseline_completion', 0)}%",
        })


def render_score(dataset):
    render_chart(create_health_score_gauge(dataset.health_score), "Health Score")
    render_chart(create_score_breakdown_chart(dataset.property.get("breakdown")), "Score Breakdown")
    if dataset.health_score is not None:
        alert_type, message = score_alert(dataset.health_score)
        render_alert_banner(message, alert_type)
    level = dataset.property.get("certification_level")
    if level:
        render_alert_banner(f"Certified {level.title()}", "success")


def render_baseline(dataset):
    systems = dataset.frame("systems")
    if not systems.empty:
        first = systems.iloc[0]
        if tour_button(f"🔧 {first['nickname']} ({first['condition']})", "system-card-first",
                       width="stretch"):
            st.session_state["selected_system"] = first["id"]
    if st.session_state.get("selected_system"):
        st.caption(f"Selected system: {st.session_state['selected_system']}")
    render_data_table(systems, "Systems")
    render_chart(create_system_lifecycle_chart(systems), "System Lifecycle")


def render_inspect(dataset):
    render_data_table(dataset.frame("inspections"), "Inspections")


def render_track(dataset):
    render_data_table(dataset.frame("maintenance_history"), "Maintenance History")


def render_prioritize(dataset):
    tour_target("task-queue", "Task queue")
    tasks = dataset.frame("tasks")
    if tasks.empty:
        render_alert_banner("No tasks yet. Start from your inspection findings to build your queue.", "warning")
        return
    open_tasks = tasks[tasks["status"] == "Identified"] if "status" in tasks.columns else tasks
    render_data_table(open_tasks, "Task Queue")
    render_chart(create_cost_comparison_chart(tasks), "Cost Comparison")


def render_schedule(dataset):
    tasks = dataset.frame("tasks")
    if tasks.empty or "scheduled_date" not in tasks.columns:
        st.info("Nothing scheduled yet.")
        return
    scheduled = tasks.dropna(subset=["scheduled_date"]).sort_values("scheduled_date")
    render_data_table(scheduled[[c for c in ("scheduled_date", "title", "priority", "unit_tag") if c in scheduled.columns]],
                      "Scheduled Work")


def render_execute(dataset):
    tasks = dataset.frame("tasks")
    if tasks.empty:
        st.info("No tasks to execute yet.")
        return
    for task in tasks.to_dict("records"):
        with st.container(border=True):
            st.markdown(f"**{task['title']}** · {task['priority']}")
            st.caption(f"{task['status']} · {_money(task.get('current_fix_cost'))}")


def render_preserve(dataset):
    render_data_table(dataset.frame("preserve_schedules"), "Preservation Plan")


def render_upgrade(dataset):
    render_data_table(dataset.frame("upgrade_projects"), "Upgrade Projects")


def render_scale(dataset):
    metrics = dataset.portfolio_metrics
    render_metric_cards({
        "current_equity": _money(metrics.get("current_equity")),
        "10yr_equity": _money(metrics.get("projected_equity_10yr")),
        "recommendation": metrics.get("recommendation", "Hold"),
    })
    render_chart(
        create_equity_projection_chart(metrics.get("current_equity"), metrics.get("projected_equity_10yr")),
        "Equity Projection",
    )


PAGE_RENDERERS = {
    "Dashboard": ("📊 Dashboard", render_dashboard),
    "Properties": ("🏠 Properties", render_properties),
    "Score360": ("💯 360° Score", render_score),
    "Baseline": ("📋 Baseline", render_baseline),
    "Inspect": ("🔍 Inspect", render_inspect),
    "Track": ("🗂️ Track", render_track),
    "Prioritize": ("🎯 Prioritize", render_prioritize),
    "Schedule": ("📅 Schedule", render_schedule),
    "Execute": ("🛠️ Execute", render_execute),
    "Preserve": ("🛡️ Preserve", render_preserve),
    "Upgrade": ("📈 Upgrade", render_upgrade),
    "Scale": ("🏢 Scale", render_scale),
}


def page_title(page_id):
    canonical = canonical_for(page_id)
    return PAGE_RENDERERS.get(canonical, (page_id, None))[0]


def render_page(page_id):
    """Render page_id, a canonical page or any profile's demo variant"""
    runtime = get_runtime()
    manager = runtime.manager
    render_navigation_sidebar()

    owner = profile_for_page(page_id)
    if owner.is_active and manager.profile is not owner:
        if manager.is_demo:
            # Another profile's page; show the active profile's variant instead
            go_to(canonical_for(page_id, owner))
            return
        render_page_header(page_title(page_id))
        st.info("This page belongs to a demo. Enter it to explore with sample data.")
        if st.button(f"Enter the {owner.value} demo", type="primary", key="enter_owner_demo"):
            manager.enter_profile(owner)
            st.rerun()
        return

    canonical = canonical_for(page_id, manager.profile)
    title, renderer = PAGE_RENDERERS.get(canonical, (page_id, None))
    dataset = manager.dataset

    if dataset is None or renderer is None:
        render_page_header(title)
        st.info("Your own property data appears here once you sign up. Meanwhile, explore a demo property.")
        if st.button("🎭 Explore a Demo", type="primary", key="page_try_demo"):
            runtime.navigator.push("DemoEntry")
        return

    address = dataset.property.get("address", "")
    render_page_header(title, f"Demo · {address}")
    renderer(dataset)

    runtime.engagement.track_feature_view(canonical)
    trigger = ENGAGEMENT_TRIGGERS.get(canonical)
    if trigger:
        runtime.engagement.trigger(trigger, {"score": dataset.health_score})


def make_page(page_id):
    """Page callable for st.Page; one function per page id"""
    def render():
        render_page(page_id)
    render.__name__ = f"render_{page_id}"
    return render
