import json
import logging
import os

from pyvis.network import Network

logger = logging.getLogger(__name__)

_HIERARCHICAL_OPTIONS = """
var options = {
    "layout": {
        "hierarchical": {
            "enabled": true,
            "direction": "UD",
            "sortMethod": "directed",
            "shakeTowards": "roots",
            "levelSeparation": 150,
            "nodeSpacing": 100
        }
    },
    "physics": {
        "hierarchicalRepulsion": {
            "centralGravity": 0.0,
            "springLength": 100,
            "springConstant": 0.01,
            "nodeDistance": 120,
            "damping": 0.09
        },
        "maxVelocity": 50,
        "solver": "hierarchicalRepulsion",
        "stabilization": {"iterations": 100}
    },
    "nodes": {
        "font": {
            "size": 12,
            "color": "white"
        }
    },
    "edges": {
        "smooth": {
            "type": "cubicBezier",
            "forceDirection": "vertical",
            "roundness": 0.4
        }
    }
}
"""


def _average(snapshot):
    visits = snapshot['visit_count']
    return snapshot['total_reward'] / visits if visits > 0 else 0.0


def format_tree(snapshot, max_depth=None, indent="  "):
    """
    Indented text listing of a snapshot, depth first.

    Each line reads `action: total_reward / visit_count`.
    """
    if not snapshot:
        return ""
    lines = []

    def walk(node, depth):
        name = "root" if node['action'] is None else node['action']
        lines.append(f"{indent * depth}{name}: {node['total_reward']:g} / {node['visit_count']}")
        if max_depth is not None and depth >= max_depth:
            return
        for child in node['children']:
            walk(child, depth + 1)

    walk(snapshot, 0)
    return "\n".join(lines)


def _get_node_label(node):
    label = f"{'root' if node['action'] is None else node['action']}\n"
    label += f"Visits: {node['visit_count']}\n"
    label += f"Reward: {node['total_reward']:.3f}\n"
    label += f"Avg: {_average(node):.3f}"
    return label


def _node_color(node):
    if node['action'] is None:
        return "#9C27B0"  # root
    if not node['children']:
        return "#FF9800"  # leaf
    return "#2196F3"


def snapshot_graph(snapshot):
    """Flatten a snapshot into vis-network style node and edge lists."""
    json_nodes = []
    json_edges = []
    if not snapshot:
        return json_nodes, json_edges

    stack = [(snapshot, 0, None)]
    while stack:
        node, level, parent_id = stack.pop()
        current_id = f"node_{len(json_nodes)}"
        label = _get_node_label(node)
        json_nodes.append({
            "id": current_id,
            "label": label.split('\n'),
            "level": level,
            "color": _node_color(node),
            "shape": "box",
            "title": f"{label}\nChildren: {len(node['children'])}",
        })
        if parent_id is not None:
            json_edges.append({"from": parent_id, "to": current_id})
        for child in reversed(node['children']):
            stack.append((child, level + 1, current_id))
    return json_nodes, json_edges


def tree_visualization(snapshot, title="MCTS Tree"):
    """Build a pyvis network of one snapshot with a top-down hierarchical layout."""
    net = Network(height="600px", width="100%", bgcolor="#222222", font_color="white",
                  directed=True, heading=title)
    json_nodes, json_edges = snapshot_graph(snapshot)
    for node in json_nodes:
        net.add_node(
            node["id"],
            label="\n".join(node["label"]),
            level=node["level"],
            color=node["color"],
            shape=node["shape"],
            title=node["title"],
        )
    for edge in json_edges:
        net.add_edge(edge["from"], edge["to"])
    net.set_options(_HIERARCHICAL_OPTIONS)
    logger.debug("Tree visualization: %d nodes, %d edges", len(net.nodes), len(net.edges))
    return net


def save_trace_html(trace, filename, title="MCTS search trace"):
    """
    Write a standalone HTML page stepping through every snapshot of `trace`,
    plus the snapshot data as `<name>_data.json` next to it.
    """
    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)

    json_snapshots = []
    for iteration, snapshot in zip(trace.iteration_numbers(), trace):
        nodes, edges = snapshot_graph(snapshot)
        json_snapshots.append({
            "iteration": iteration,
            "title": f"{title} - iteration {iteration}",
            "total_nodes": len(nodes),
            "nodes": nodes,
            "edges": edges,
        })

    json_filename = os.path.splitext(filename)[0] + '_data.json'
    with open(json_filename, 'w', encoding='utf-8') as f:
        json.dump(json_snapshots, f, indent=2, ensure_ascii=False)

    html_content = f"""<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <title>{title}</title>
  <style>
    body {{ margin: 0; font-family: sans-serif; background-color: #1a1a1a; color: #ffffff; }}
    #toolbar {{ display: flex; gap: 12px; align-items: center; padding: 16px; background-color: #2d2d2d; }}
    #mynetwork {{ height: calc(100vh - 120px); background-color: #222222; margin: 16px; border: 1px solid #444; }}
    button {{ padding: 8px 16px; border-radius: 6px; border: 1px solid #555; background: #3a3a3a; color: #ffffff; }}
    button:disabled {{ background: #2a2a2a; color: #666; }}
    #title {{ font-weight: 600; margin-left: 16px; color: #4CAF50; }}
  </style>
</head>
<body>
  <div id="toolbar">
    <button id="prev">&larr; Prev</button>
    <button id="next">Next &rarr;</button>
    <span id="title">{title}</span>
    <span>Nodes: <span id="nodeCount">-</span></span>
  </div>
  <div id="mynetwork"></div>

  <script src="https://unpkg.com/vis-network/standalone/umd/vis-network.min.js"></script>
  <script>
    const snapshots = {json.dumps(json_snapshots, ensure_ascii=False)};
    let currentIdx = 0;
    const nodes = new vis.DataSet([]);
    const edges = new vis.DataSet([]);
    const network = new vis.Network(document.getElementById('mynetwork'), {{ nodes, edges }}, {{
      layout: {{ hierarchical: {{ enabled: true, direction: "UD", sortMethod: "directed",
                                 levelSeparation: 150, nodeSpacing: 100 }} }},
      physics: {{ solver: "hierarchicalRepulsion", stabilization: {{ iterations: 100 }} }},
      nodes: {{ font: {{ size: 11, color: '#ffffff' }} }},
      edges: {{ arrows: {{ to: {{ enabled: true, scaleFactor: 0.5 }} }} }}
    }});

    function loadSnapshot(idx) {{
      if (idx < 0 || idx >= snapshots.length) return;
      currentIdx = idx;
      const snapshot = snapshots[idx];
      nodes.clear();
      edges.clear();
      nodes.add(snapshot.nodes.map(n => Object.assign({{}}, n, {{ label: n.label.join('\\n') }})));
      edges.add(snapshot.edges);
      document.getElementById('title').textContent = snapshot.title;
      document.getElementById('nodeCount').textContent = snapshot.total_nodes;
      document.getElementById('prev').disabled = idx <= 0;
      document.getElementById('next').disabled = idx >= snapshots.length - 1;
    }}

    document.getElementById('prev').onclick = () => loadSnapshot(currentIdx - 1);
    document.getElementById('next').onclick = () => loadSnapshot(currentIdx + 1);
    document.addEventListener('keydown', (e) => {{
      if (e.key === 'ArrowLeft') loadSnapshot(currentIdx - 1);
      if (e.key === 'ArrowRight') loadSnapshot(currentIdx + 1);
    }});

    if (snapshots.length > 0) {{
      loadSnapshot(0);
    }} else {{
      document.getElementById('title').textContent = 'No snapshots available';
    }}
  </script>
</body>
</html>
"""

    with open(filename, 'w', encoding='utf-8') as f:
        f.write(html_content)

    logger.info("Trace visualization saved to %s (%d snapshots)", filename, len(json_snapshots))
    return filename
