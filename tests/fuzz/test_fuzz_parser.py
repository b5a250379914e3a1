import io
import unittest
import pytest

import gotoscript_lang
from gotoscript_lang import (
    BinaryCondition,
    ChunkManager,
    CommandStatement,
    ConditionBranch,
    ConditionalBlock,
    DefeatedCondition,
    DoWhileStatement,
    FlagCondition,
    IfStatement,
    SwitchBranch,
    SwitchCase,
    SwitchStatement,
    VarCondition,
    WhileStatement,
)
from gotoscript_lang.models import COMPARISONS

hypothesis = pytest.importorskip("hypothesis")
strategies = hypothesis.strategies

_leaf_conditions = strategies.one_of(
    strategies.builds(FlagCondition, strategies.sampled_from(["FLAG_A", "FLAG_B"]), strategies.booleans()),
    strategies.builds(
        VarCondition,
        strategies.just("VAR_X"),
        strategies.sampled_from(sorted(COMPARISONS)),
        strategies.sampled_from(["0", "1"]),
        strategies.booleans(),
    ),
    strategies.builds(DefeatedCondition, strategies.just("TRAINER_A"), strategies.booleans()),
)
_conditions = strategies.recursive(
    _leaf_conditions,
    lambda inner: strategies.builds(
        BinaryCondition, strategies.sampled_from(["&&", "||"]), inner, inner
    ),
    max_leaves=4,
)
_commands = strategies.builds(
    CommandStatement,
    strategies.sampled_from(["lock", "msgbox", "release"]),
    strategies.lists(strategies.sampled_from(["A", "B"]), max_size=2),
)


def _branching(blocks):
    arms = strategies.builds(ConditionalBlock, _conditions, blocks)
    return strategies.one_of(
        strategies.builds(
            IfStatement, arms, strategies.lists(arms, max_size=2), strategies.none() | blocks
        ),
        strategies.builds(WhileStatement, _conditions, blocks),
        strategies.builds(DoWhileStatement, _conditions, blocks),
        strategies.builds(
            SwitchStatement,
            strategies.just("VAR_X"),
            strategies.lists(
                strategies.builds(SwitchCase, strategies.sampled_from(["0", "1", "2"]), blocks),
                max_size=3,
            ),
            strategies.none() | blocks,
        ),
    )


_statement_lists = strategies.recursive(
    strategies.lists(_commands, max_size=4),
    lambda blocks: strategies.lists(strategies.one_of(_commands, _branching(blocks)), max_size=4),
    max_leaves=12,
)


def _source_commands(statements, found):
    for stmt in statements:
        if isinstance(stmt, CommandStatement):
            found.append(stmt)
        elif isinstance(stmt, IfStatement):
            for arm in [stmt.consequence] + stmt.elifs:
                _source_commands(arm.body, found)
            if stmt.alternative is not None:
                _source_commands(stmt.alternative, found)
        elif isinstance(stmt, (WhileStatement, DoWhileStatement)):
            _source_commands(stmt.body, found)
        elif isinstance(stmt, SwitchStatement):
            for case in stmt.cases:
                _source_commands(case.body, found)
            if stmt.default is not None:
                _source_commands(stmt.default, found)
    return found


def _targets(chunk):
    behavior = chunk.branch_behavior
    if isinstance(behavior, ConditionBranch):
        yield behavior.success_id
    elif isinstance(behavior, SwitchBranch):
        for _, chunk_id in behavior.cases:
            yield chunk_id
        if behavior.default_id is not None:
            yield behavior.default_id
    if chunk.return_id != gotoscript_lang.NO_RETURN:
        yield chunk.return_id


class FuzzTests(unittest.TestCase):
    @hypothesis.settings(deadline=None)
    @hypothesis.given(strategies.text())
    def test_fuzz_compiler_stability(self, trash_text: str) -> None:
        try:
            gotoscript_lang.compile_source(trash_text)
        except gotoscript_lang.GotoscriptError:
            # Expected failure path for invalid programs.
            return

    @hypothesis.settings(deadline=None, suppress_health_check=[hypothesis.HealthCheck.too_slow])
    @hypothesis.given(_statement_lists)
    def test_split_preserves_every_command_once(self, statements) -> None:
        source = _source_commands(statements, [])
        chunks = ChunkManager("S", statements).split()

        self.assertEqual([c.id for c in chunks], list(range(len(chunks))))

        emitted = [stmt for chunk in chunks for stmt in chunk.statements]
        self.assertEqual(sorted(map(id, emitted)), sorted(map(id, source)))

        order = {id(stmt): i for i, stmt in enumerate(source)}
        for chunk in chunks:
            positions = [order[id(stmt)] for stmt in chunk.statements]
            self.assertEqual(positions, sorted(positions))

    @hypothesis.settings(deadline=None, suppress_health_check=[hypothesis.HealthCheck.too_slow])
    @hypothesis.given(_statement_lists)
    def test_every_jump_lands_on_a_chunk(self, statements) -> None:
        manager = ChunkManager("S", statements)
        chunks = manager.split()
        known = {c.id for c in chunks}
        for chunk in chunks:
            for target in _targets(chunk):
                self.assertIn(target, known)
            if chunk.branch_behavior is not None and not chunk.branch_behavior.requires_tail_jump():
                out = io.StringIO()
                chunk.render_branching("S", out)
                self.assertTrue(out.getvalue().splitlines()[-1].startswith("\tgoto "))
        text = manager.render()
        self.assertTrue(text.startswith("S::\n"))


if __name__ == "__main__":
    unittest.main(verbosity=2)
