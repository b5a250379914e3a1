from .grammar import GOTOSCRIPT_GRAMMAR
from .exceptions import (
    GotoscriptError,
    ScriptSyntaxError,
    ConfigError,
    ChunkInvariantError,
)
from .models import (
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
    SwitchCase,
    SwitchStatement,
    VarCondition,
    WhileStatement,
)
from .config import CompileOptions, load_options
from .chunk import NO_RETURN, Chunk, ChunkCounter, local_label
from .branching import BranchBehavior, ConditionBranch, SwitchBranch
from .parser import (
    GotoscriptToAst,
    JumpBinder,
    ScriptParser,
    check_script_names,
    parse_source,
)
from .emitter import ChunkManager, Emitter, compile_source

__all__ = [
    "GOTOSCRIPT_GRAMMAR",
    "GotoscriptError",
    "ScriptSyntaxError",
    "ConfigError",
    "ChunkInvariantError",
    "BinaryCondition",
    "BreakStatement",
    "CommandStatement",
    "ConditionalBlock",
    "ContinueStatement",
    "DefeatedCondition",
    "DoWhileStatement",
    "FlagCondition",
    "IfStatement",
    "Program",
    "RawStatement",
    "ScriptStatement",
    "SwitchCase",
    "SwitchStatement",
    "VarCondition",
    "WhileStatement",
    "CompileOptions",
    "load_options",
    "NO_RETURN",
    "Chunk",
    "ChunkCounter",
    "local_label",
    "BranchBehavior",
    "ConditionBranch",
    "SwitchBranch",
    "GotoscriptToAst",
    "JumpBinder",
    "ScriptParser",
    "check_script_names",
    "parse_source",
    "ChunkManager",
    "Emitter",
    "compile_source",
]
