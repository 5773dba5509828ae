from typing import Optional


class Node:
    """A declared network node. Ids are always strings, even when numeric."""

    def __init__(self, node_id: str, label: str = "", attributes: Optional[dict] = None):
        self.node_id = str(node_id)
        self.label = label or self.node_id
        # Remaining scalar keys of the block (value, graphics colour, ...)
        self.attributes = dict(attributes or {})
        self.degree = 0

    def to_dict(self) -> dict:
        return {
            "id": self.node_id,
            "label": self.label,
            "degree": self.degree,
            "attributes": self.attributes,
        }

    def __repr__(self) -> str:
        return f"Node({self.node_id!r}, degree={self.degree})"
