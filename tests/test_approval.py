"""
Tests for agent_demos/approval.py
=================================
The approval gate is driven with scripted input — no console needed.

Covers:
  - request_approval: yes/y/no/n, case, re-prompt, banner, EOF
  - ToolInvocationRequest: read-only arguments snapshot
  - ApprovalQueue: FIFO drain, one decision per call id
"""
import pytest

from agent_demos.approval import ApprovalQueue, ToolInvocationRequest, request_approval
from conftest import scripted_inputs


def _ask(*answers):
    output = []
    approved = request_approval(
        "delete_file", {"filename": "a.txt"},
        input_fn=scripted_inputs(*answers), output_fn=output.append,
    )
    return approved, output


# ---------------------------------------------------------------------------
# request_approval
# ---------------------------------------------------------------------------

class TestRequestApproval:
    @pytest.mark.parametrize("answer", ["yes", "y", "YES", " Y "])
    def test_affirmative(self, answer):
        approved, _ = _ask(answer)
        assert approved is True

    @pytest.mark.parametrize("answer", ["no", "n", "No", " N "])
    def test_negative(self, answer):
        approved, _ = _ask(answer)
        assert approved is False

    def test_reprompts_until_valid(self):
        approved, output = _ask("maybe", "", "y")

        assert approved is True
        assert output.count("   Please enter 'yes' or 'no'") == 2

    def test_banner_shows_function_and_arguments(self):
        _, output = _ask("n")

        assert "🚨 APPROVAL REQUIRED" in output
        assert "📝 Function: delete_file" in output
        assert "   - filename: a.txt" in output

    def test_eof_propagates(self):
        with pytest.raises(EOFError):
            request_approval("delete_file", {}, input_fn=scripted_inputs(), output_fn=lambda _: None)


# ---------------------------------------------------------------------------
# ToolInvocationRequest
# ---------------------------------------------------------------------------

class TestToolInvocationRequest:
    def test_arguments_are_read_only(self):
        request = ToolInvocationRequest("delete_file", {"filename": "a.txt"}, "call_1")
        with pytest.raises(TypeError):
            request.arguments["filename"] = "b.txt"

    def test_caller_mutation_does_not_leak(self):
        args = {"filename": "a.txt"}
        request = ToolInvocationRequest("delete_file", args, "call_1")
        args["filename"] = "b.txt"

        assert request.arguments["filename"] == "a.txt"

    def test_from_tool_call(self):
        request = ToolInvocationRequest.from_tool_call(
            {"name": "delete_file", "args": {"filename": "x"}, "id": "call_9"}
        )
        assert (request.name, dict(request.arguments), request.call_id) == ("delete_file", {"filename": "x"}, "call_9")


# ---------------------------------------------------------------------------
# ApprovalQueue
# ---------------------------------------------------------------------------

class TestApprovalQueue:
    def test_drains_in_order_with_one_decision_each(self):
        seen = []

        def approver(name, arguments):
            seen.append(arguments["filename"])
            return arguments["filename"] == "keep-going.txt"

        queue = ApprovalQueue(approver)
        queue.enqueue(ToolInvocationRequest("delete_file", {"filename": "first.txt"}, "call_1"))
        queue.enqueue(ToolInvocationRequest("delete_file", {"filename": "keep-going.txt"}, "call_2"))
        assert len(queue) == 2

        decisions = queue.drain()

        assert seen == ["first.txt", "keep-going.txt"]
        assert decisions == {"call_1": False, "call_2": True}
        assert len(queue) == 0

    def test_request_without_call_id_is_refused(self):
        queue = ApprovalQueue(lambda *_: True)
        with pytest.raises(ValueError, match="no call id"):
            queue.enqueue(ToolInvocationRequest("delete_file", {"filename": "a.txt"}))

    def test_duplicate_call_id_is_refused(self):
        queue = ApprovalQueue(lambda *_: True)
        queue.enqueue(ToolInvocationRequest("delete_file", {"filename": "a.txt"}, "call_1"))
        with pytest.raises(ValueError, match="Duplicate"):
            queue.enqueue(ToolInvocationRequest("delete_file", {"filename": "b.txt"}, "call_1"))

    def test_empty_queue_drains_to_nothing(self):
        assert ApprovalQueue(lambda *_: True).drain() == {}
