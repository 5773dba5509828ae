import math

MIN_RADIUS = 4.0
MAX_RADIUS = 18.0

# Light to dark blue ramp for the degree color scale
LOW_COLOR = (0xde, 0xeb, 0xf7)
HIGH_COLOR = (0x08, 0x30, 0x6b)


def scaled_degree(degree: int, log_scale: bool = False) -> float:
    # log(k + 1) keeps degree 0 at 0 and compresses hubs
    return math.log(degree + 1) if log_scale else float(degree)


def degree_radius(degree: int, max_degree: int, log_scale: bool = False) -> float:
    # Square-root scale so circle area grows linearly with degree
    top = scaled_degree(max_degree, log_scale)
    if top <= 0:
        return MIN_RADIUS
    return MIN_RADIUS + (MAX_RADIUS - MIN_RADIUS) * math.sqrt(scaled_degree(degree, log_scale) / top)


def degree_color(degree: int, max_degree: int, log_scale: bool = False) -> str:
    top = scaled_degree(max_degree, log_scale)
    t = scaled_degree(degree, log_scale) / top if top > 0 else 0.0
    channels = (round(lo + (hi - lo) * t) for lo, hi in zip(LOW_COLOR, HIGH_COLOR))
    return "#{:02x}{:02x}{:02x}".format(*channels)


class NodeVisualDecorator:
    """Adds size and color encodings to a serialized node.

    Both the linear and the log(k + 1) encodings are emitted so the page can
    switch between them without a round trip.
    """

    def __init__(self, node: dict, max_degree: int):
        self._node = node
        self.max_degree = max_degree

    def radius(self, log_scale: bool = False) -> float:
        return round(degree_radius(self._node["degree"], self.max_degree, log_scale), 2)

    def color(self, log_scale: bool = False) -> str:
        return degree_color(self._node["degree"], self.max_degree, log_scale)

    def to_dict(self) -> dict:
        return {
            **self._node,
            "radius": self.radius(),
            "color": self.color(),
            "log_radius": self.radius(log_scale=True),
            "log_color": self.color(log_scale=True),
        }
