import re
from functools import lru_cache
from typing import List, Optional, Union

from lark import Lark, Transformer, v_args
from lark.exceptions import UnexpectedInput, VisitError

from .exceptions import ScriptSyntaxError
from .grammar import GOTOSCRIPT_GRAMMAR
from .models import (
    AND,
    OR,
    BinaryCondition,
    BreakStatement,
    CommandStatement,
    ConditionalBlock,
    ContinueStatement,
    DefeatedCondition,
    DoWhileStatement,
    FlagCondition,
    IfStatement,
    Program,
    RawStatement,
    ScriptStatement,
    Statement,
    SwitchCase,
    SwitchStatement,
    VarCondition,
    WhileStatement,
)


def _line(meta) -> int:
    return int(getattr(meta, "line", 0) or 0)


class _DefaultClause:
    __slots__ = ("body", "line")

    def __init__(self, body: List[Statement], line: int):
        self.body = body
        self.line = line


class _ElseClause:
    __slots__ = ("body",)

    def __init__(self, body: List[Statement]):
        self.body = body


class GotoscriptToAst(Transformer):
    """Builds the statement tree from a lark parse tree."""

    def start(self, items):
        return Program(list(items))

    @v_args(meta=True)
    def script_def(self, meta, items):
        return ScriptStatement(str(items[0]), items[1], line=_line(meta))

    @v_args(meta=True)
    def raw_def(self, meta, items):
        return RawStatement(str(items[0])[1:-1], line=_line(meta))

    def block(self, items):
        return list(items)

    # --- Statements ---

    def command(self, items):
        name = items[0]
        args = items[1] if len(items) > 1 else []
        return CommandStatement(str(name), args, line=name.line)

    def arg_list(self, items):
        return [str(a).strip() for a in items]

    @v_args(meta=True)
    def if_stmt(self, meta, items):
        consequence = ConditionalBlock(items[0], items[1])
        elifs: List[ConditionalBlock] = []
        alternative = None
        for clause in items[2:]:
            if isinstance(clause, _ElseClause):
                alternative = clause.body
            else:
                elifs.append(clause)
        return IfStatement(consequence, elifs, alternative, line=_line(meta))

    def elif_clause(self, items):
        return ConditionalBlock(items[0], items[1])

    def else_clause(self, items):
        return _ElseClause(items[0])

    @v_args(meta=True)
    def while_stmt(self, meta, items):
        return WhileStatement(items[0], items[1], line=_line(meta))

    @v_args(meta=True)
    def do_while_stmt(self, meta, items):
        return DoWhileStatement(items[1], items[0], line=_line(meta))

    @v_args(meta=True)
    def switch_stmt(self, meta, items):
        line = _line(meta)
        stmt = SwitchStatement(str(items[0]), line=line)
        for clause in items[1:]:
            if isinstance(clause, _DefaultClause):
                if stmt.default is not None:
                    raise ScriptSyntaxError(
                        "Multiple 'default' cases in switch statement", clause.line or line
                    )
                stmt.default = clause.body
            else:
                stmt.cases.append(clause)
        return stmt

    def case_clause(self, items):
        return SwitchCase(str(items[0]), list(items[1:]))

    @v_args(meta=True)
    def default_clause(self, meta, items):
        return _DefaultClause(list(items), _line(meta))

    def break_stmt(self, items):
        return BreakStatement(line=items[0].line)

    def continue_stmt(self, items):
        return ContinueStatement(line=items[0].line)

    # --- Conditions ---

    def or_op(self, items):
        return BinaryCondition(OR, items[0], items[1])

    def and_op(self, items):
        return BinaryCondition(AND, items[0], items[1])

    def not_op(self, items):
        return items[0].negate()

    def flag_cond(self, items):
        return FlagCondition(str(items[0]))

    def var_cond(self, items):
        if len(items) == 3:
            return VarCondition(str(items[0]), str(items[1]), str(items[2]))
        return VarCondition(str(items[0]))

    def defeated_cond(self, items):
        return DefeatedCondition(str(items[0]))


Loop = Union[WhileStatement, DoWhileStatement]
Breakable = Union[WhileStatement, DoWhileStatement, SwitchStatement]


class JumpBinder:
    """Attaches every break/continue to the construct it leaves."""

    def bind_program(self, program: Program) -> Program:
        for script in program.scripts:
            self.bind(script.body, None, None)
        return program

    def bind(
        self,
        statements: List[Statement],
        breakable: Optional[Breakable],
        loop: Optional[Loop],
    ) -> None:
        last = len(statements) - 1
        for position, stmt in enumerate(statements):
            if isinstance(stmt, BreakStatement):
                if breakable is None:
                    raise ScriptSyntaxError(
                        "'break' used outside of a loop or switch", stmt.line
                    )
                stmt.target = breakable
                self._require_last(stmt, position, last)
            elif isinstance(stmt, ContinueStatement):
                if loop is None:
                    raise ScriptSyntaxError("'continue' used outside of a loop", stmt.line)
                stmt.target = loop
                self._require_last(stmt, position, last)
            elif isinstance(stmt, IfStatement):
                for arm in [stmt.consequence] + stmt.elifs:
                    self.bind(arm.body, breakable, loop)
                if stmt.alternative is not None:
                    self.bind(stmt.alternative, breakable, loop)
            elif isinstance(stmt, (WhileStatement, DoWhileStatement)):
                self.bind(stmt.body, stmt, stmt)
            elif isinstance(stmt, SwitchStatement):
                for case in stmt.cases:
                    self.bind(case.body, stmt, loop)
                if stmt.default is not None:
                    self.bind(stmt.default, stmt, loop)

    @staticmethod
    def _require_last(stmt: Statement, position: int, last: int) -> None:
        if position != last:
            raise ScriptSyntaxError(
                f"Unreachable statement after '{stmt.token_literal()}'", stmt.line
            )


# Local chunk labels are "<script>_<id>" with id >= 1.
_LOCAL_LABEL = re.compile(r"^(?P<script>.+)_[1-9][0-9]*$")


def check_script_names(program: Program) -> Program:
    """Reject script names whose labels would clash in the assembled output."""
    names = set()
    for script in program.scripts:
        if script.name in names:
            raise ScriptSyntaxError(f"Duplicate script name '{script.name}'", script.line)
        names.add(script.name)
    for script in program.scripts:
        match = _LOCAL_LABEL.match(script.name)
        if match and match.group("script") in names:
            raise ScriptSyntaxError(
                f"Script name '{script.name}' collides with a local label of "
                f"script '{match.group('script')}'",
                script.line,
            )
    return program


class ScriptParser:
    def __init__(self):
        self._lark = Lark(GOTOSCRIPT_GRAMMAR, parser="lalr", propagate_positions=True)

    def parse(self, source: str) -> Program:
        try:
            tree = self._lark.parse(source)
        except UnexpectedInput as e:
            line = getattr(e, "line", -1)
            if line is None or line < 1:
                raise ScriptSyntaxError("Unexpected end of input") from e
            raise ScriptSyntaxError(f"Unexpected input at column {e.column}", line) from e
        try:
            program = GotoscriptToAst().transform(tree)
        except VisitError as e:
            if isinstance(e.orig_exc, ScriptSyntaxError):
                raise e.orig_exc from None
            raise
        check_script_names(program)
        return JumpBinder().bind_program(program)


@lru_cache(maxsize=1)
def _default_parser() -> ScriptParser:
    return ScriptParser()


def parse_source(source: str) -> Program:
    return _default_parser().parse(source)
