from dataclasses import dataclass, field
from typing import List, Optional, Union

AND = "&&"
OR = "||"

# operator -> (mnemonic suffix, inverse operator)
COMPARISONS = {
    "==": ("eq", "!="),
    "!=": ("ne", "=="),
    "<": ("lt", ">="),
    "<=": ("le", ">"),
    ">": ("gt", "<="),
    ">=": ("ge", "<"),
}


# --- Conditions ---


@dataclass
class FlagCondition:
    name: str
    negated: bool = False

    def negate(self) -> "FlagCondition":
        return FlagCondition(self.name, not self.negated)


@dataclass
class VarCondition:
    name: str
    operator: str = "!="
    value: str = "0"
    negated: bool = False

    def negate(self) -> "VarCondition":
        return VarCondition(self.name, self.operator, self.value, not self.negated)

    @property
    def effective_operator(self) -> str:
        if self.negated:
            return COMPARISONS[self.operator][1]
        return self.operator


@dataclass
class DefeatedCondition:
    name: str
    negated: bool = False

    def negate(self) -> "DefeatedCondition":
        return DefeatedCondition(self.name, not self.negated)


LeafCondition = Union[FlagCondition, VarCondition, DefeatedCondition]


@dataclass
class BinaryCondition:
    operator: str
    left: "Condition"
    right: "Condition"

    def negate(self) -> "BinaryCondition":
        flipped = OR if self.operator == AND else AND
        return BinaryCondition(flipped, self.left.negate(), self.right.negate())


Condition = Union[LeafCondition, BinaryCondition]


# --- Statements ---
# Statements compare by identity: break/continue targets and loop bookkeeping
# are keyed on the statement object itself.


@dataclass(eq=False)
class CommandStatement:
    name: str
    args: List[str] = field(default_factory=list)
    line: int = 0

    def token_literal(self) -> str:
        return self.name


@dataclass(eq=False)
class ConditionalBlock:
    condition: Condition
    body: List["Statement"] = field(default_factory=list)


@dataclass(eq=False)
class IfStatement:
    consequence: ConditionalBlock
    elifs: List[ConditionalBlock] = field(default_factory=list)
    alternative: Optional[List["Statement"]] = None
    line: int = 0

    def token_literal(self) -> str:
        return "if"


@dataclass(eq=False)
class WhileStatement:
    condition: Condition
    body: List["Statement"] = field(default_factory=list)
    line: int = 0

    def token_literal(self) -> str:
        return "while"


@dataclass(eq=False)
class DoWhileStatement:
    condition: Condition
    body: List["Statement"] = field(default_factory=list)
    line: int = 0

    def token_literal(self) -> str:
        return "do"


@dataclass(eq=False)
class SwitchCase:
    value: str
    body: List["Statement"] = field(default_factory=list)


@dataclass(eq=False)
class SwitchStatement:
    operand: str
    cases: List[SwitchCase] = field(default_factory=list)
    default: Optional[List["Statement"]] = None
    line: int = 0

    def token_literal(self) -> str:
        return "switch"


@dataclass(eq=False)
class BreakStatement:
    target: Optional[Union[WhileStatement, DoWhileStatement, SwitchStatement]] = None
    line: int = 0

    def token_literal(self) -> str:
        return "break"


@dataclass(eq=False)
class ContinueStatement:
    target: Optional[Union[WhileStatement, DoWhileStatement]] = None
    line: int = 0

    def token_literal(self) -> str:
        return "continue"


Statement = Union[
    CommandStatement,
    IfStatement,
    WhileStatement,
    DoWhileStatement,
    SwitchStatement,
    BreakStatement,
    ContinueStatement,
]


@dataclass(eq=False)
class ScriptStatement:
    name: str
    body: List[Statement] = field(default_factory=list)
    line: int = 0

    def token_literal(self) -> str:
        return "script"


@dataclass(eq=False)
class RawStatement:
    text: str
    line: int = 0

    def token_literal(self) -> str:
        return "raw"


@dataclass
class Program:
    items: List[Union[ScriptStatement, RawStatement]] = field(default_factory=list)

    @property
    def scripts(self) -> List[ScriptStatement]:
        return [item for item in self.items if isinstance(item, ScriptStatement)]
