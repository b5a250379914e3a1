from dataclasses import dataclass, field
from typing import List, Optional, TextIO, Tuple, TYPE_CHECKING

from .config import CompileOptions
from .exceptions import ChunkInvariantError
from .models import CommandStatement, Statement

if TYPE_CHECKING:
    from .branching import BranchBehavior

# Sentinel return id: the chunk ends with an explicit return instead of a jump.
NO_RETURN = -1


def local_label(script_name: str, chunk_id: int) -> str:
    return f"{script_name}_{chunk_id}"


class ChunkCounter:
    """Script-scoped source of chunk ids. Ids are never reused or handed out twice."""

    def __init__(self, start: int = 0):
        self.value = start

    def allocate(self) -> int:
        self.value += 1
        return self.value


@dataclass(eq=False)
class Chunk:
    """A single chunk of script output, addressed by its own label."""

    id: int
    return_id: int = NO_RETURN
    statements: List[Statement] = field(default_factory=list)
    branch_behavior: Optional["BranchBehavior"] = None

    def render(
        self, script_name: str, out: TextIO, options: Optional[CompileOptions] = None
    ) -> None:
        self.render_label(script_name, out)
        self.render_statements(out, options)
        self.render_branching(script_name, out)

    def render_label(self, script_name: str, out: TextIO) -> None:
        if self.id == 0:
            # Script entrypoint, so it gets a global label.
            out.write(f"{script_name}::\n")
        else:
            out.write(f"{local_label(script_name, self.id)}:\n")

    def render_statements(
        self, out: TextIO, options: Optional[CompileOptions] = None
    ) -> None:
        for stmt in self.statements:
            if not isinstance(stmt, CommandStatement):
                raise ChunkInvariantError(
                    "Could not render chunk statement because it is not a command "
                    f"statement {stmt.token_literal()!r}"
                )
            if options is not None and options.line_markers and stmt.line:
                out.write(f'# {stmt.line} "{options.source_name}"\n')
            out.write(render_command_statement(stmt))

    def render_branching(self, script_name: str, out: TextIO) -> None:
        requires_tail_jump = True
        if self.branch_behavior is not None:
            self.branch_behavior.render_branch_conditions(out, script_name)
            requires_tail_jump = self.branch_behavior.requires_tail_jump()
        if requires_tail_jump:
            if self.return_id == NO_RETURN:
                out.write("\treturn\n")
            else:
                out.write(f"\tgoto {local_label(script_name, self.return_id)}\n")

    def split_for_branch(
        self, statement_index: int, counter: ChunkCounter, remaining: List["Chunk"]
    ) -> Tuple[List["Chunk"], int]:
        """Cut the chunk at a branching statement.

        Statements after the branch move into a new post-logic chunk that
        inherits this chunk's return point; this chunk then falls through to
        it. When the branch is the last statement nothing moves and the
        continuation is simply this chunk's own return point. Either way the
        chunk keeps only the statements before the branch.
        """
        if self.is_last_statement(statement_index):
            continuation = self.return_id
        else:
            post_logic = self.create_post_logic_chunk(counter.allocate(), statement_index)
            remaining.append(post_logic)
            continuation = post_logic.id
            self.return_id = post_logic.id
        self.statements = self.statements[:statement_index]
        return remaining, continuation

    def is_last_statement(self, statement_index: int) -> bool:
        return statement_index == len(self.statements) - 1

    def create_post_logic_chunk(self, chunk_id: int, branch_index: int) -> "Chunk":
        return Chunk(
            id=chunk_id,
            return_id=self.return_id,
            statements=self.statements[branch_index + 1 :],
        )


def render_command_statement(stmt: CommandStatement) -> str:
    if stmt.args:
        return f"\t{stmt.name} {', '.join(stmt.args)}\n"
    return f"\t{stmt.name}\n"
