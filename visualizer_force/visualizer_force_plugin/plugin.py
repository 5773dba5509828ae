import json
import os
from jinja2 import Environment, FileSystemLoader, select_autoescape
from api.network_api.services.visualizer_plugin import VisualizerPlugin
from core.network_platform.context import PipelineContext
from .node_visual_decorator import NodeVisualDecorator

# Size of the network drawing area
WIDTH = 960
HEIGHT = 640

TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")


class ForceVisualizer(VisualizerPlugin):
    @property
    def plugin_id(self) -> str:
        return "force"

    @property
    def display_name(self) -> str:
        return "Force-directed View"

    def render_options_schema(self) -> dict:
        return {
            "width": {"type": "int", "label": "Drawing width", "required": False, "default": WIDTH},
            "height": {"type": "int", "label": "Drawing height", "required": False, "default": HEIGHT},
            "log_scale": {"type": "bool", "label": "Size nodes by log(degree + 1)", "required": False, "default": False},
        }

    def build_payload(self, context: PipelineContext) -> dict:
        payload = context.to_dict()
        nodes = payload["graph"]["nodes"]
        max_degree = max((n["degree"] for n in nodes), default=0)
        payload["graph"]["nodes"] = [NodeVisualDecorator(n, max_degree).to_dict() for n in nodes]
        return payload

    def render(self, context: PipelineContext, **options) -> str:
        if not context.graph.nodes and not context.graph.edges:
            return "<html><body>Empty Graph</body></html>"

        payload = self.build_payload(context)

        env = Environment(loader=FileSystemLoader(TEMPLATE_DIR), autoescape=select_autoescape(["html"]))
        template = env.get_template("force.html")

        return template.render(
            title=context.source_name or "Network",
            rows=context.metrics.rows(),
            exponent=payload["distribution"]["exponent_display"],
            undefined=context.metrics.undefined,
            # </script> inside ids must not end the data block
            payload_json=json.dumps(payload).replace("</", "<\\/"),
            width=int(options.get("width", WIDTH)),
            height=int(options.get("height", HEIGHT)),
            log_scale=bool(options.get("log_scale", False)),
        )
