import streamlit as st
import plotly.express as px
import plotly.graph_objects as go
import pandas as pd
from datetime import date, timedelta

from projectpert.config import configure_logging, get_config
from projectpert.data_loader import schedule_frame, tasks_from_frame
from projectpert.errors import ScheduleError
from projectpert.graph import layout_positions, to_mermaid
from projectpert.service import ScheduleService

# --- App Configuration ---
st.set_page_config(page_title="PERT / CPM Planner", page_icon="🗺️", layout="wide")

config = get_config()
configure_logging(config.log_level)
service = ScheduleService(config)

# --- Starter project ---
EXAMPLE_TASKS = [
    {'Name': 'A', 'Duration': 3, 'Predecessors': ''},
    {'Name': 'B', 'Duration': 2, 'Predecessors': 'A'},
    {'Name': 'C', 'Duration': 4, 'Predecessors': 'A'},
    {'Name': 'D', 'Duration': 1, 'Predecessors': 'B, C'},
]


def editor_frame(request):
    """Rows for the task editor, rebuilt from a `{t0, tasks}` request."""
    rows = []
    for t in request['tasks']:
        preds = t.get('predecessors') or []
        rows.append({'Name': t.get('name'), 'Duration': t.get('duration'),
                     'Predecessors': preds if isinstance(preds, str) else ', '.join(preds)})
    return pd.DataFrame(rows, columns=['Name', 'Duration', 'Predecessors'])


def create_network_chart(result):
    """Activity-on-node diagram; critical tasks and edges drawn in red."""
    pos = layout_positions(result)
    crit_edges = {(e.source, e.target) for e in result.critical_edges}

    fig = go.Figure()
    for critical, color, width in ((False, '#888', 1), (True, '#d33', 3)):
        edge_x, edge_y = [], []
        for t in result:
            for p in t.predecessors:
                if ((p, t.name) in crit_edges) != critical:
                    continue
                x0, y0 = pos[p]; x1, y1 = pos[t.name]
                edge_x.extend([x0, x1, None]); edge_y.extend([y0, y1, None])
        fig.add_trace(go.Scatter(x=edge_x, y=edge_y, mode='lines', hoverinfo='none',
                                 line=dict(width=width, color=color)))

    names = list(result.order)
    fig.add_trace(go.Scatter(
        x=[pos[n][0] for n in names], y=[pos[n][1] for n in names],
        mode='markers+text', text=names, textposition='top center',
        hoverinfo='text',
        hovertext=[(f"<b>{t.name}</b> ({t.duration})<br>"
                    f"ES {t.es} / EF {t.ef}<br>LS {t.ls} / LF {t.lf}<br>"
                    f"Total slack {t.total_slack}, free slack {t.free_slack}") for t in result],
        marker=dict(size=22, line_width=2,
                    color=['#FF4B4B' if result[n].is_critical else '#1f77b4' for n in names]),
    ))
    fig.update_layout(
        showlegend=False, hovermode='closest', height=500,
        margin=dict(b=0, l=0, r=0, t=20),
        xaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
        yaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
        plot_bgcolor='rgba(0,0,0,0)',
    )
    return fig


def create_gantt_chart(result, start_date):
    """Day `t0` of the schedule is drawn on `start_date`."""
    df = schedule_frame(result)
    df['Start_Date'] = [start_date + timedelta(days=es - result.project_start) for es in df['ES']]
    df['End_Date'] = [start_date + timedelta(days=ef - result.project_start + 1) for ef in df['EF']]
    df['Path'] = df['Critical'].map({True: 'Critical', False: 'Has slack'})
    fig = px.timeline(df, x_start='Start_Date', x_end='End_Date', y='Task', color='Path',
                      color_discrete_map={'Critical': '#FF4B4B', 'Has slack': '#1f77b4'},
                      hover_data=['ES', 'EF', 'LS', 'LF', 'TotalSlack'])
    fig.update_yaxes(autorange='reversed')
    fig.update_layout(plot_bgcolor='rgba(0,0,0,0)', paper_bgcolor='rgba(0,0,0,0)', height=400)
    return fig


# --- STATE ---
if 'request' not in st.session_state:
    st.session_state['request'] = {'t0': config.default_t0, 'tasks': tasks_from_frame(pd.DataFrame(EXAMPLE_TASKS))}
if 'result' not in st.session_state:
    st.session_state['result'] = None

# --- SIDEBAR: saved projects ---
st.sidebar.title("📁 Saved Projects")
try:
    projects = service.list_projects()
except (OSError, ValueError) as e:
    projects = []
    st.sidebar.error(f"Cannot read saved projects: {e}")

if not projects:
    st.sidebar.info("No saved projects yet.")
for proj in projects:
    label = f"{proj['created_at'] or proj['id']} · {proj['tasks_count']} tasks · finish {proj['project_finish']}"
    with st.sidebar.expander(label):
        c1, c2 = st.columns(2)
        if c1.button("Load", key=f"load_{proj['id']}"):
            record = service.get_project(proj['id'])
            st.session_state['request'] = {'t0': record.get('t0', config.default_t0), 'tasks': record.get('input_tasks', [])}
            st.session_state['result'] = None
            st.rerun()
        if c2.button("Delete", key=f"del_{proj['id']}"):
            service.delete_project(proj['id'])
            st.rerun()

# --- MAIN ---
st.title("🗺️ PERT / CPM Planner")
st.write("Enter tasks with a duration and the tasks they depend on. "
         "Names are case-insensitive; list several predecessors separated by commas.")

request = st.session_state['request']
with st.form('tasks_form'):
    col_a, col_b, col_c = st.columns(3)
    t0 = col_a.number_input("Project start (t0)", min_value=0, value=int(request['t0']), step=1)
    start_date = col_b.date_input("Calendar date of t0", value=date.today())
    save = col_c.checkbox("Save snapshot", value=config.save_projects)
    edited = st.data_editor(editor_frame(request), num_rows='dynamic', use_container_width=True)
    submitted = st.form_submit_button("Compute schedule")

if submitted:
    request = {'t0': int(t0), 'tasks': tasks_from_frame(edited)}
    st.session_state['request'] = request
    try:
        result, project_id = service.run(request, save=save)
    except ScheduleError as e:
        st.session_state['result'] = None
        st.error(f"{e.kind}: {e}")
    else:
        st.session_state['result'] = result
        if project_id:
            st.toast(f"Saved as {project_id}")

result = st.session_state['result']
if result is not None:
    m1, m2, m3 = st.columns(3)
    m1.metric("Project finish", f"Day {result.project_finish}")
    m2.metric("Duration", f"{result.project_duration} days")
    m3.metric("Critical path", " → ".join(result.critical_path))

    st.subheader("Network Diagram")
    st.plotly_chart(create_network_chart(result), use_container_width=True)

    st.subheader("Timeline")
    st.plotly_chart(create_gantt_chart(result, start_date), use_container_width=True)

    with st.expander("📊 Schedule Table"):
        st.dataframe(schedule_frame(result), use_container_width=True)
    with st.expander("Mermaid"):
        st.code(to_mermaid(result), language='text')
