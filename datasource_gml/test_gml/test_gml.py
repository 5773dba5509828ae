import logging
import os

import pytest

from api.network_api.errors import RetrievalFailure
from datasource_gml.datasource_gml_plugin.plugin import GmlDatasourcePlugin, parse

TEST_DATA = os.path.join(os.path.dirname(__file__), "test_data")
SAMPLE = os.path.join(TEST_DATA, "sample.gml")


def node_ids(graph):
    return [n.node_id for n in graph.nodes]


def edge_pairs(graph):
    return [(e.source, e.target) for e in graph.edges]


def test_parse_path_graph(path_graph_text):
    graph = parse(path_graph_text)

    assert node_ids(graph) == ["1", "2", "3"]
    assert edge_pairs(graph) == [("1", "2"), ("2", "3")]


def test_parse_is_idempotent(path_graph_text):
    assert parse(path_graph_text).structure() == parse(path_graph_text).structure()


def test_identifiers_are_strings_and_quotes_are_stripped():
    graph = parse('node [ id "7" ] node [ id abc ] edge [ source "7" target abc ]')

    assert node_ids(graph) == ["7", "abc"]
    assert edge_pairs(graph) == [("7", "abc")]
    assert all(isinstance(n.node_id, str) for n in graph.nodes)


def test_whitespace_between_key_and_value_is_flexible():
    graph = parse("node [\n  id\n\n   12\n]\nedge [ source\t12\n target   12 ]")
    assert node_ids(graph) == ["12"]
    assert edge_pairs(graph) == [("12", "12")]


def test_edge_missing_target_contributes_nothing():
    graph = parse("edge [ source 5 ]")
    assert graph.edges == []


def test_blocks_without_required_keys_are_skipped():
    plugin = GmlDatasourcePlugin()
    graph = plugin.load_graph(None, text='node [ label "x" ] node [ ] node [ id 1 ] edge [ target 1 ]')

    assert node_ids(graph) == ["1"]
    assert graph.edges == []
    assert plugin.last_report.skipped_nodes == 2
    assert plugin.last_report.skipped_edges == 1


def test_non_alphanumeric_identifier_counts_as_absent():
    graph = parse('node [ id "two words" ] node [ id 3 ]')
    assert node_ids(graph) == ["3"]


def test_duplicate_keys_first_match_wins():
    graph = parse("node [ id 1 id 2 ] edge [ source 1 source 9 target 1 ]")
    assert node_ids(graph) == ["1"]
    assert edge_pairs(graph) == [("1", "1")]


def test_duplicate_node_declaration_is_skipped():
    plugin = GmlDatasourcePlugin()
    graph = plugin.load_graph(None, text="node [ id 1 label first ] node [ id 1 label second ]")

    assert node_ids(graph) == ["1"]
    assert graph.nodes[0].label == "first"
    assert plugin.last_report.skipped_nodes == 1


def test_dangling_edge_reference_is_kept():
    graph = parse('node [ id 1 ] edge [ source 1 target "9" ]')
    assert edge_pairs(graph) == [("1", "9")]
    assert graph.dangling_ids() == ["9"]


def test_empty_and_missing_text_give_empty_graph():
    for text in ("", None, "   ", "just some words"):
        graph = parse(text)
        assert graph.nodes == []
        assert graph.edges == []


def test_load_sample_file():
    plugin = GmlDatasourcePlugin()
    graph = plugin.load_graph(SAMPLE)

    assert node_ids(graph) == ["1", "2", "3", "n4"]
    assert edge_pairs(graph) == [("1", "2"), ("1", "3"), ("1", "n4"), ("3", "3"), ("n4", "9")]
    assert graph.directed is False

    hub = graph.get_node("1")
    assert hub.label == "Hub [central]"
    assert graph.get_node("3").attributes == {"value": 7}
    assert graph.edges[1].weight == 2.5

    report = plugin.last_report
    assert (report.nodes, report.edges, report.skipped_nodes, report.skipped_edges) == (4, 5, 2, 1)


def test_directed_flag_is_read_from_graph_block():
    graph = parse("graph [ directed 1 node [ id 1 ] ]")
    assert graph.directed is True


def test_missing_file_raises_retrieval_failure(tmp_path):
    with pytest.raises(RetrievalFailure):
        GmlDatasourcePlugin().load_graph(str(tmp_path / "absent.gml"))


def test_missing_source_raises_retrieval_failure():
    with pytest.raises(RetrievalFailure):
        GmlDatasourcePlugin().load_graph(None)


def test_parse_logs_report(caplog):
    with caplog.at_level(logging.INFO, logger="datasource_gml.datasource_gml_plugin.plugin"):
        parse("node [ id 1 ] edge [ source 1 ]")
    assert "1 nodes, 0 edges, 1 malformed blocks skipped" in caplog.text


def test_text_option_is_parsed_alongside_other_options():
    graph = GmlDatasourcePlugin().load_graph(None, text="node [ id 1 ] node [ id 2 ]", encoding="latin-1")
    assert node_ids(graph) == ["1", "2"]


def test_hash_inside_a_block_does_not_hide_later_blocks():
    graph = parse("node [ id 1 color #ff0000 ] node [ id 2 ] edge [ source 1 target 2 ]")

    assert node_ids(graph) == ["1", "2"]
    assert edge_pairs(graph) == [("1", "2")]
    assert graph.get_node("1").attributes == {"color": "#ff0000"}


def test_unpaired_quote_only_affects_its_own_block():
    graph = parse('node [ id 1 label "abc ]\nnode [ id 2 ]\nedge [ source 2 target 2 ]')

    assert node_ids(graph) == ["1", "2"]
    assert edge_pairs(graph) == [("2", "2")]


def test_comment_lines_are_ignored():
    graph = parse("# exported by a tool\n  # indented note\nnode [ id 1 ]\n")
    assert node_ids(graph) == ["1"]
