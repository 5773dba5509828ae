class Edge:
    def __init__(self, source: str, target: str,
                edge_id: str = None,
                weight: float = 1.0,
                directed: bool = False,
                attributes: dict = None):
        self.edge_id = edge_id
        self.source = source
        self.target = target
        self.weight = weight
        self.directed = directed
        self.attributes = attributes or {}

    def endpoints(self) -> tuple:
        return self.source, self.target

    def to_dict(self) -> dict:
        return {
            "id": self.edge_id,
            "source": self.source,
            "target": self.target,
            "weight": self.weight,
            "directed": self.directed,
            "attributes": self.attributes,
        }

    def __repr__(self) -> str:
        return f"Edge({self.source!r} -> {self.target!r})"
