"""Error taxonomy shared by the parser, the analysis core and the web layer."""


class NetworkAnalysisError(ValueError):
    """Base class for every error raised by the analysis pipeline."""

    code = "NetworkAnalysisError"

    def __init__(self, message: str = "", **details):
        super().__init__(message or self.code)
        self.details = details

    def to_dict(self) -> dict:
        payload = {"error": self.code, "message": str(self)}
        if self.details:
            payload["details"] = self.details
        return payload


class MalformedBlockError(NetworkAnalysisError):
    """A node/edge block lacks one of its required keys."""

    code = "MalformedBlock"


class DegenerateGraphError(NetworkAnalysisError):
    """A metric is undefined for the graph size (no nodes, or a single node)."""

    code = "DegenerateGraph"


class InsufficientRegressionDataError(NetworkAnalysisError):
    """Fewer than two positive-degree points are available for the log-log fit."""

    code = "InsufficientRegressionData"


class RetrievalFailure(NetworkAnalysisError):
    """The raw markup could not be read from its source."""

    code = "RetrievalFailure"


# Not raised: dangling edge endpoints are recovered by implicit zero-degree
# initialization. The code is still used in log records and diagnostics.
DANGLING_EDGE_REFERENCE = "DanglingEdgeReference"
