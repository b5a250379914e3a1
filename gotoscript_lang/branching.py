from abc import ABC, abstractmethod
from typing import List, Optional, TextIO, Tuple

from .chunk import local_label
from .models import (
    COMPARISONS,
    DefeatedCondition,
    FlagCondition,
    LeafCondition,
    VarCondition,
)


class BranchBehavior(ABC):
    """Conditional control flow that ends a chunk."""

    @abstractmethod
    def render_branch_conditions(self, out: TextIO, script_name: str) -> None: ...

    @abstractmethod
    def requires_tail_jump(self) -> bool:
        """False when the rendered conditions already leave the chunk on every path."""


class ConditionBranch(BranchBehavior):
    """Jumps to ``success_id`` when a single condition holds; otherwise falls through."""

    def __init__(self, condition: LeafCondition, success_id: int):
        self.condition = condition
        self.success_id = success_id

    def render_branch_conditions(self, out: TextIO, script_name: str) -> None:
        label = local_label(script_name, self.success_id)
        cond = self.condition
        if isinstance(cond, FlagCondition):
            op = "goto_if_unset" if cond.negated else "goto_if_set"
            out.write(f"\t{op} {cond.name}, {label}\n")
        elif isinstance(cond, VarCondition):
            mnemonic = COMPARISONS[cond.effective_operator][0]
            out.write(f"\tcompare {cond.name}, {cond.value}\n")
            out.write(f"\tgoto_if_{mnemonic} {label}\n")
        elif isinstance(cond, DefeatedCondition):
            op = "goto_if_not_defeated" if cond.negated else "goto_if_defeated"
            out.write(f"\t{op} {cond.name}, {label}\n")
        else:
            raise TypeError(f"Unsupported branch condition {cond!r}")

    def requires_tail_jump(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"ConditionBranch({self.condition!r}, success_id={self.success_id})"


class SwitchBranch(BranchBehavior):
    """Dispatches on a variable; the default arm, if any, is an unconditional jump."""

    def __init__(
        self,
        operand: str,
        cases: List[Tuple[str, int]],
        default_id: Optional[int] = None,
    ):
        self.operand = operand
        self.cases = cases
        self.default_id = default_id

    def render_branch_conditions(self, out: TextIO, script_name: str) -> None:
        out.write(f"\tswitch {self.operand}\n")
        for value, chunk_id in self.cases:
            out.write(f"\tcase {value}, {local_label(script_name, chunk_id)}\n")
        if self.default_id is not None:
            out.write(f"\tgoto {local_label(script_name, self.default_id)}\n")

    def requires_tail_jump(self) -> bool:
        return self.default_id is None

    def __repr__(self) -> str:
        return (
            f"SwitchBranch({self.operand!r}, cases={self.cases!r}, "
            f"default_id={self.default_id})"
        )
