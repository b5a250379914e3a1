import io
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .branching import ConditionBranch, SwitchBranch
from .chunk import NO_RETURN, Chunk, ChunkCounter
from .config import CompileOptions
from .models import (
    AND,
    BinaryCondition,
    BreakStatement,
    CommandStatement,
    Condition,
    ContinueStatement,
    DoWhileStatement,
    IfStatement,
    Program,
    RawStatement,
    ScriptStatement,
    Statement,
    SwitchStatement,
    WhileStatement,
)
from .parser import parse_source

logger = logging.getLogger(__name__)


class ChunkManager:
    """Owns the chunk arena of one script and lowers its branches into chunks.

    Split order: chunks are processed first-in first-out in creation order.
    Each visit handles only the first branching statement of a chunk; whatever
    followed it has already moved into a post-logic chunk further down the
    worklist.
    """

    def __init__(
        self,
        script_name: str,
        statements: Sequence[Statement],
        options: Optional[CompileOptions] = None,
    ):
        self.script_name = script_name
        self.options = options if options is not None else CompileOptions()
        self.counter = ChunkCounter()
        self.chunks: Dict[int, Chunk] = {}
        self._remaining: List[Chunk] = [
            Chunk(id=self.counter.value, return_id=NO_RETURN, statements=list(statements))
        ]
        # loop/switch statement -> (continue target, break target)
        self._jump_targets: Dict[Statement, Tuple[Optional[int], int]] = {}
        self._split_done = False

    # --- Split pass ---

    def split(self) -> List[Chunk]:
        if not self._split_done:
            while self._remaining:
                chunk = self._remaining.pop(0)
                index = self._first_branch_index(chunk)
                if index is None:
                    self._finalize(chunk)
                    continue
                self._split_branch(chunk, index)
            self._split_done = True
            logger.debug(
                "Script %s lowered into %d chunk(s)", self.script_name, len(self.chunks)
            )
        return [self.chunks[chunk_id] for chunk_id in sorted(self.chunks)]

    @staticmethod
    def _first_branch_index(chunk: Chunk) -> Optional[int]:
        for i, stmt in enumerate(chunk.statements):
            if not isinstance(stmt, CommandStatement):
                return i
        return None

    def _split_branch(self, chunk: Chunk, index: int) -> None:
        stmt = chunk.statements[index]
        self._remaining, continuation = chunk.split_for_branch(
            index, self.counter, self._remaining
        )
        logger.debug(
            "Split chunk %d of %s at %r (statement %d); continuation=%d",
            chunk.id,
            self.script_name,
            stmt.token_literal(),
            index,
            continuation,
        )
        if isinstance(stmt, IfStatement):
            self._lower_if(chunk, stmt, continuation)
        elif isinstance(stmt, WhileStatement):
            self._lower_while(chunk, stmt, continuation)
        elif isinstance(stmt, DoWhileStatement):
            self._lower_do_while(chunk, stmt, continuation)
        elif isinstance(stmt, SwitchStatement):
            self._lower_switch(chunk, stmt, continuation)
        elif isinstance(stmt, BreakStatement):
            chunk.return_id = self._jump_target(stmt)[1]
        elif isinstance(stmt, ContinueStatement):
            header_id = self._jump_target(stmt)[0]
            if header_id is None:
                raise TypeError(
                    f"'{stmt.token_literal()}' is not bound to an enclosing loop"
                )
            chunk.return_id = header_id
        else:
            raise TypeError(f"Unsupported branching statement {stmt.token_literal()!r}")
        self._finalize(chunk)

    def _jump_target(self, stmt) -> Tuple[Optional[int], int]:
        if stmt.target not in self._jump_targets:
            raise TypeError(
                f"'{stmt.token_literal()}' is not bound to an enclosing loop or switch"
            )
        return self._jump_targets[stmt.target]

    # --- Branch lowering ---

    def _lower_if(self, chunk: Chunk, stmt: IfStatement, continuation: int) -> None:
        arms = [stmt.consequence] + stmt.elifs
        body_ids = [self._queue_body(arm.body, continuation).id for arm in arms]
        if stmt.alternative is not None:
            else_id = self._queue_body(stmt.alternative, continuation).id
        else:
            else_id = continuation
        hosts = [chunk] + [self._new_condition_chunk() for _ in arms[1:]]
        for i, arm in enumerate(arms):
            fail_id = hosts[i + 1].id if i + 1 < len(hosts) else else_id
            self._lower_condition(arm.condition, body_ids[i], fail_id, hosts[i])

    def _lower_while(self, chunk: Chunk, stmt: WhileStatement, continuation: int) -> None:
        header = self._new_condition_chunk()
        chunk.return_id = header.id
        body = self._queue_body(stmt.body, header.id)
        self._jump_targets[stmt] = (header.id, continuation)
        self._lower_condition(stmt.condition, body.id, continuation, header)

    def _lower_do_while(
        self, chunk: Chunk, stmt: DoWhileStatement, continuation: int
    ) -> None:
        body = self._queue_body(stmt.body, NO_RETURN)
        header = self._new_condition_chunk()
        body.return_id = header.id
        chunk.return_id = body.id
        self._jump_targets[stmt] = (header.id, continuation)
        self._lower_condition(stmt.condition, body.id, continuation, header)

    def _lower_switch(self, chunk: Chunk, stmt: SwitchStatement, continuation: int) -> None:
        case_ids: List[Optional[int]] = [
            self._queue_body(case.body, continuation).id if case.body else None
            for case in stmt.cases
        ]
        default_id = None
        if stmt.default is not None:
            default_id = self._queue_body(stmt.default, continuation).id
        # Empty cases share the body of the next case that has one.
        shared = default_id if default_id is not None else continuation
        for i in reversed(range(len(case_ids))):
            if case_ids[i] is None:
                case_ids[i] = shared
            else:
                shared = case_ids[i]
        cases = [(case.value, case_id) for case, case_id in zip(stmt.cases, case_ids)]
        self._jump_targets[stmt] = (None, continuation)
        chunk.branch_behavior = SwitchBranch(stmt.operand, cases, default_id)
        chunk.return_id = continuation

    def _lower_condition(
        self, condition: Condition, success_id: int, fail_id: int, host: Chunk
    ) -> None:
        if isinstance(condition, BinaryCondition):
            right_host = self._new_condition_chunk()
            if condition.operator == AND:
                self._lower_condition(condition.left, right_host.id, fail_id, host)
            else:
                self._lower_condition(condition.left, success_id, right_host.id, host)
            self._lower_condition(condition.right, success_id, fail_id, right_host)
            return
        host.branch_behavior = ConditionBranch(condition, success_id)
        host.return_id = fail_id

    # --- Chunk bookkeeping ---

    def _queue_body(self, statements: Sequence[Statement], return_id: int) -> Chunk:
        chunk = Chunk(
            id=self.counter.allocate(), return_id=return_id, statements=list(statements)
        )
        self._remaining.append(chunk)
        return chunk

    def _new_condition_chunk(self) -> Chunk:
        chunk = Chunk(id=self.counter.allocate())
        self._finalize(chunk)
        return chunk

    def _finalize(self, chunk: Chunk) -> None:
        self.chunks[chunk.id] = chunk

    # --- Rendering ---

    def render(self) -> str:
        rendered = []
        for chunk in self.split():
            out = io.StringIO()
            chunk.render(self.script_name, out, self.options)
            rendered.append(out.getvalue())
        return "\n".join(rendered)


class Emitter:
    """Renders a whole program: every script through its own ChunkManager, raw blocks verbatim."""

    def __init__(self, options: Optional[CompileOptions] = None):
        self.options = options if options is not None else CompileOptions()

    def emit(self, program: Program) -> str:
        sections = []
        for item in program.items:
            if isinstance(item, ScriptStatement):
                sections.append(self.emit_script(item))
            elif isinstance(item, RawStatement):
                sections.append(self.emit_raw(item))
        return "\n".join(section for section in sections if section)

    def emit_script(self, script: ScriptStatement) -> str:
        return ChunkManager(script.name, script.body, self.options).render()

    @staticmethod
    def emit_raw(raw: RawStatement) -> str:
        text = raw.text.strip("\n")
        return f"{text}\n" if text else ""


def compile_source(source: str, options: Optional[CompileOptions] = None) -> str:
    return Emitter(options).emit(parse_source(source))
