"""Unit tests for data flow validation and variable references."""

from __future__ import annotations

from flowbuilder.core.types import WorkflowNode
from flowbuilder.validation.data_flow import validate_data_flow
from flowbuilder.validation.references import extract_references, iter_message_contents
from tests.factories import condition_node, linear_graph, llm_node, make_edge, make_node


class TestExtractReferences:
    """Tests for {{node.field}} parsing."""

    def test_single_reference(self) -> None:
        refs = extract_references("Answer: {{input.message}}")

        assert len(refs) == 1
        assert refs[0].raw == "{{input.message}}"
        assert refs[0].node_ref == "input"
        assert refs[0].path == ("message",)

    def test_nested_path_and_whitespace(self) -> None:
        refs = extract_references("{{ http.response.body }} and {{llm}}")

        assert [r.node_ref for r in refs] == ["http", "llm"]
        assert refs[0].path == ("response", "body")
        assert refs[1].path == ()

    def test_padded_segments_are_trimmed(self) -> None:
        refs = extract_references("{{ http . response }}")

        assert refs[0].node_ref == "http"
        assert refs[0].path == ("response",)

    def test_no_references(self) -> None:
        assert extract_references("plain text {single}") == []


class TestIterMessageContents:
    def test_skips_rich_text_and_empty(self) -> None:
        node = WorkflowNode.model_validate({
            "id": "n",
            "kind": "llm",
            "nodeConfig": {
                "messages": [
                    {"role": "system", "content": "You help."},
                    {"role": "user", "content": {"type": "doc"}},
                    {"role": "user", "content": ""},
                ],
            },
        })

        assert list(iter_message_contents(node)) == ["You help."]

    def test_no_messages(self) -> None:
        node = WorkflowNode.model_validate({"id": "n", "kind": "llm"})

        assert list(iter_message_contents(node)) == []


class TestValidateDataFlow:
    """Tests for validate_data_flow."""

    def test_valid_linear_workflow(self) -> None:
        nodes, edges = linear_graph()
        result = validate_data_flow(nodes, edges)

        assert result.is_valid is True
        assert result.issues == []
        assert result.suggestions == []
        assert result.data_flow_stats.reachable_nodes == 3

    def test_dangling_edges(self) -> None:
        nodes, edges = linear_graph()
        edges.append({"id": "e", "source": "ghost-a", "target": "ghost-b"})

        result = validate_data_flow(nodes, edges)

        assert "Edge references non-existent source node: ghost-a" in result.issues
        assert "Edge references non-existent target node: ghost-b" in result.issues

    def test_unreachable_node_is_an_issue(self) -> None:
        nodes, edges = linear_graph()
        stray = make_node("code", "stray")
        nodes.append(stray)
        edges.append(make_edge(stray, nodes[2]))

        result = validate_data_flow(nodes, edges)

        assert result.is_valid is False
        assert "Unreachable nodes detected: stray" in result.issues
        assert result.data_flow_stats.unreachable_nodes == 1

    def test_input_and_note_never_unreachable(self) -> None:
        nodes, edges = linear_graph()
        nodes.append(make_node("note", "memo"))

        assert validate_data_flow(nodes, edges).is_valid is True

    def test_unknown_reference(self) -> None:
        source = make_node("input", "input")
        writer = llm_node("writer", "Use {{fetch.body}} and {{input.message}}")
        sink = make_node("output")

        result = validate_data_flow(
            [source, writer, sink], [make_edge(source, writer), make_edge(writer, sink)]
        )

        assert result.issues == ['LLM node "writer" references non-existent node: fetch']

    def test_nonexistent_reference_is_the_only_issue(self) -> None:
        source = make_node("input", "input")
        writer = llm_node("writer", "Use {{nonexistent.field}}")
        sink = make_node("output")

        result = validate_data_flow(
            [source, writer, sink], [make_edge(source, writer), make_edge(writer, sink)]
        )

        assert result.is_valid is False
        assert len(result.issues) == 1
        assert "nonexistent" in result.issues[0]

    def test_padded_placeholder_resolves(self) -> None:
        source = make_node("input", "input")
        writer = llm_node("writer", "Answer: {{ input.message }}")
        sink = make_node("output")

        result = validate_data_flow(
            [source, writer, sink], [make_edge(source, writer), make_edge(writer, sink)]
        )

        assert result.is_valid is True
        assert result.issues == []

    def test_reference_by_id(self) -> None:
        source = make_node("input", "input")
        writer = llm_node("writer", f"{{{{{source['id']}.message}}}}")
        sink = make_node("output")

        result = validate_data_flow(
            [source, writer, sink], [make_edge(source, writer), make_edge(writer, sink)]
        )

        assert result.is_valid is True

    def test_flattened_messages_are_scanned(self) -> None:
        source = make_node("input", "input")
        writer = {
            "id": "writer",
            "kind": "llm",
            "name": "writer",
            "messages": [{"role": "user", "content": "{{missing.value}}"}],
        }
        sink = make_node("output")

        result = validate_data_flow(
            [source, writer, sink], [make_edge(source, writer), make_edge(writer, sink)]
        )

        assert 'LLM node "writer" references non-existent node: missing' in result.issues

    def test_dead_end_is_a_suggestion(self) -> None:
        source = make_node("input", "input")
        writer = llm_node("writer", "hi")
        sink = make_node("output")

        result = validate_data_flow(
            [source, writer, sink], [make_edge(source, writer), make_edge(source, sink)]
        )

        assert result.is_valid is True
        assert "Consider connecting nodes without outgoing edges: writer" in result.suggestions

    def test_unrouted_condition_branch_is_a_suggestion(self) -> None:
        source = make_node("input", "input")
        cond = condition_node("check", "yes", "no")
        sink = make_node("output")
        edges = [make_edge(source, cond), make_edge(cond, sink, "yes")]

        result = validate_data_flow([source, cond, sink], edges)

        assert result.is_valid is True
        assert any('"check" has branches without edges: no' in s for s in result.suggestions)

    def test_invalid_condition_config_is_reported(self) -> None:
        source = make_node("input", "input")
        cond = make_node("condition", "check", branches={"if": {"id": "a", "type": "maybe"}})
        sink = make_node("output")
        edges = [make_edge(source, cond), make_edge(cond, sink)]

        result = validate_data_flow([source, cond, sink], edges)

        assert 'Condition node "check" has an invalid branch configuration' in result.suggestions

    def test_camel_case_output(self) -> None:
        nodes, edges = linear_graph()
        data = validate_data_flow(nodes, edges).model_dump(by_alias=True)

        assert data["isValid"] is True
        assert data["dataFlowStats"]["nodesWithoutOutgoing"] == 0
