import math

import pytest

from api.network_api.analysis import analyze, annotate, fit_line, format_exponent, summarize
from api.network_api.analysis.distribution import histogram, loglog_points
from api.network_api.analysis.metrics import average_degree, density, format_metric
from api.network_api.errors import DegenerateGraphError, InsufficientRegressionDataError
from api.network_api.model import Edge, Graph, Node
from datasource_gml.datasource_gml_plugin.plugin import parse


def build_graph(node_ids, edges):
    g = Graph()
    for node_id in node_ids:
        g.add_node(Node(node_id))
    for source, target in edges:
        g.add_edge(Edge(source, target))
    return g


def assert_partition(bins, degrees):
    assert bins[0].lower == 0
    assert bins[-1].upper == max(degrees)
    for left, right in zip(bins, bins[1:]):
        assert left.upper == right.lower
    assert sum(b.count for b in bins) == len(degrees)
    for d in degrees:
        holders = [
            b for i, b in enumerate(bins)
            if b.lower <= d < b.upper or (i == len(bins) - 1 and b.lower <= d <= b.upper)
        ]
        assert len(holders) == 1


# ----------------------------
# Degree & adjacency
# ----------------------------

def test_path_graph_degrees(path_graph_text):
    graph = parse(path_graph_text)
    annotation = annotate(graph)

    assert annotation.degree_of == {"1": 1, "2": 2, "3": 1}
    assert [n.degree for n in graph.nodes] == [1, 2, 1]


def test_handshake_lemma_counts_self_loops_twice():
    graph = build_graph(["a", "b"], [("a", "a"), ("a", "b"), ("a", "b")])
    annotation = annotate(graph)

    assert annotation.degree_of == {"a": 4, "b": 2}
    assert sum(annotation.degree_of.values()) == 2 * len(graph.edges)


def test_handshake_lemma_with_dangling_references():
    graph = parse('node [ id 1 ] edge [ source 1 target "9" ] edge [ source 8 target 9 ]')
    annotation = annotate(graph)

    assert sum(annotation.degree_of.values()) == 2 * len(graph.edges)


def test_dangling_reference_gets_implicit_degree(caplog):
    graph = parse('node [ id 1 ] edge [ source 1 target "9" ]')
    annotation = annotate(graph)

    assert annotation.degree_of["9"] >= 1
    assert annotation.implicit_ids == ["9"]
    assert "DanglingEdgeReference" in caplog.text


def test_adjacency_is_symmetric_and_reflexive():
    graph = build_graph(["1", "2", "3"], [("1", "2")])
    annotation = annotate(graph)

    assert annotation.is_adjacent("1", "2")
    assert annotation.is_adjacent("2", "1")
    assert annotation.is_adjacent("3", "3")
    assert not annotation.is_adjacent("1", "3")
    assert annotation.neighbors("1") == {"1", "2"}
    assert annotation.neighbors("3") == {"3"}


# ----------------------------
# Summary statistics
# ----------------------------

def test_path_graph_metrics(path_graph_text):
    graph = parse(path_graph_text)
    metrics = summarize(graph, annotate(graph).degree_of)

    assert metrics.node_count == 3
    assert metrics.edge_count == 2
    assert metrics.display("average_degree") == "1.33"
    assert metrics.display("density") == "0.6667"
    assert metrics.max_degree == 2
    assert metrics.min_degree == 1
    assert metrics.undefined == {}


def test_empty_graph_metrics_are_undefined():
    graph = Graph()
    metrics = summarize(graph, annotate(graph).degree_of)

    assert metrics.node_count == 0
    assert metrics.average_degree is None
    assert metrics.max_degree is None
    assert metrics.min_degree is None
    assert metrics.density is None
    assert set(metrics.undefined) == {"average_degree", "density", "max_degree", "min_degree"}
    assert all(reason.startswith("DegenerateGraph") for reason in metrics.undefined.values())
    assert metrics.display("density") == "undefined"


def test_single_node_density_is_undefined():
    graph = build_graph(["solo"], [])
    metrics = summarize(graph, annotate(graph).degree_of)

    assert metrics.density is None
    assert not metrics.is_defined("density")
    assert metrics.average_degree == 0
    assert metrics.max_degree == 0


def test_edges_without_declared_nodes_stay_degenerate():
    graph = parse("edge [ source 1 target 2 ]")
    metrics = summarize(graph, annotate(graph).degree_of)

    assert metrics.node_count == 0
    assert metrics.edge_count == 1
    assert metrics.average_degree is None
    assert metrics.density is None


def test_metric_formulas_raise_on_degenerate_input():
    with pytest.raises(DegenerateGraphError):
        average_degree([])
    with pytest.raises(DegenerateGraphError):
        density(1, 0)
    assert density(4, 6) == 1.0


def test_metric_rows_follow_display_contract():
    graph = build_graph(["1", "2", "3"], [("1", "2"), ("2", "3")])
    rows = summarize(graph, annotate(graph).degree_of).rows()

    assert rows == [
        ("Nodes", "3"),
        ("Edges", "2"),
        ("Average Degree", "1.33"),
        ("Density", "0.6667"),
        ("Max Degree", "2"),
        ("Min Degree", "1"),
    ]
    assert format_metric("density", None) == "undefined"


# ----------------------------
# Degree distribution
# ----------------------------

def test_histogram_partitions_degree_range(power_law_degrees):
    bins = histogram(power_law_degrees)
    assert len(bins) > 1
    assert_partition(bins, power_law_degrees)


def test_histogram_last_bin_is_closed():
    bins = histogram([0, 1, 2, 3])
    assert [(b.lower, b.upper) for b in bins] == [(0, 1), (1, 2), (2, 3)]
    assert [b.count for b in bins] == [1, 1, 2]


def test_histogram_all_zero_degrees():
    bins = histogram([0, 0, 0])
    assert len(bins) == 1
    assert (bins[0].lower, bins[0].upper, bins[0].count) == (0, 0, 3)


def test_histogram_single_repeated_degree_covers_from_zero():
    bins = histogram([4, 4])
    assert_partition(bins, [4, 4])


def test_histogram_empty():
    assert histogram([]) == []


def test_loglog_drops_zero_degree():
    points = loglog_points({0: 5, 1: 10, 10: 1})
    assert points == [(0.0, 1.0), (1.0, 0.0)]


def test_regression_recovers_power_law_exponent(power_law_degrees):
    distribution = analyze(power_law_degrees)

    assert distribution.exponent == pytest.approx(2.0, abs=0.15)
    assert distribution.undefined == {}
    assert format_exponent(distribution.exponent).startswith("γ ≈ ")


def test_fit_line_endpoints_span_observed_x(power_law_degrees):
    distribution = analyze(power_law_degrees)
    start, end = distribution.fit_line
    xs = [x for x, _ in distribution.loglog]

    assert start[0] == min(xs)
    assert end[0] == max(xs)
    fit = distribution.fit
    assert start[1] == pytest.approx(fit.intercept + fit.slope * start[0])
    assert end[1] == pytest.approx(fit.intercept + fit.slope * end[0])


def test_two_points_fit_exactly():
    fit = fit_line([(0.0, math.log10(2)), (math.log10(2), 0.0)])
    assert fit.slope == pytest.approx(-1.0)
    assert fit.exponent == pytest.approx(1.0)
    assert fit.intercept == pytest.approx(math.log10(2))


@pytest.mark.parametrize("degrees", [[], [0, 0], [3, 3, 3], [0, 2, 2]])
def test_exponent_undefined_with_fewer_than_two_points(degrees):
    distribution = analyze(degrees)

    assert distribution.exponent is None
    assert distribution.fit_line is None
    assert distribution.undefined["exponent"].startswith("InsufficientRegressionData")
    assert format_exponent(distribution.exponent) == "γ undefined"


def test_fit_line_raises_without_enough_points():
    with pytest.raises(InsufficientRegressionDataError):
        fit_line([(0.5, 1.0)])


def test_distribution_serializes_undefined_exponent():
    payload = analyze([1, 1]).to_dict()
    assert payload["exponent"] is None
    assert payload["fit_line"] is None
    assert payload["exponent_display"] == "γ undefined"


def test_histogram_counts_sum_to_node_count_without_dangling_ids(path_graph_text):
    graph = parse(path_graph_text)
    annotation = annotate(graph)
    distribution = analyze(annotation.degrees())

    assert sum(b.count for b in distribution.histogram) == len(graph.nodes)


def test_histogram_counts_include_implicit_ids():
    graph = parse("node [ id 1 ] node [ id 2 ] edge [ source 1 target 2 ] edge [ source 1 target 9 ]")
    annotation = annotate(graph)
    distribution = analyze(annotation.degrees())

    assert len(graph.nodes) == 2
    assert annotation.degree_of == {"1": 2, "2": 1, "9": 1}
    assert sum(b.count for b in distribution.histogram) == len(annotation.degree_of) == 3
