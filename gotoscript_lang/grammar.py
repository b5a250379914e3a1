GOTOSCRIPT_GRAMMAR = r"""
    start: top_level*

    ?top_level: "script" NAME block                                   -> script_def
              | "raw" RAW_TEXT                                        -> raw_def

    block: "{" statement* "}"

    // --- Statements ---
    ?statement: NAME ("(" arg_list? ")")?                             -> command
              | "if" "(" condition ")" block elif_clause* else_clause? -> if_stmt
              | "while" "(" condition ")" block                       -> while_stmt
              | "do" block "while" "(" condition ")"                  -> do_while_stmt
              | "switch" "(" "var" "(" NAME ")" ")" "{" switch_clause* "}" -> switch_stmt
              | BREAK                                                 -> break_stmt
              | CONTINUE                                              -> continue_stmt

    elif_clause: "elif" "(" condition ")" block
    else_clause: "else" block

    ?switch_clause: "case" VALUE ":" statement*                       -> case_clause
                  | "default" ":" statement*                          -> default_clause

    arg_list: arg ("," arg)*
    ?arg: STRING | ARG

    // --- Conditions ---
    ?condition: or_cond

    ?or_cond: and_cond
            | or_cond "||" and_cond                                   -> or_op

    ?and_cond: unary_cond
             | and_cond "&&" unary_cond                               -> and_op

    ?unary_cond: "!" unary_cond                                       -> not_op
               | "flag" "(" NAME ")"                                  -> flag_cond
               | "var" "(" NAME ")" (COMPARE_OP VALUE)?               -> var_cond
               | "defeated" "(" NAME ")"                              -> defeated_cond
               | "(" condition ")"

    COMPARE_OP: "==" | "!=" | "<=" | ">=" | "<" | ">"
    BREAK: "break"
    CONTINUE: "continue"

    NAME: /[a-zA-Z_]\w*/
    VALUE: /-?\w+/
    STRING: /"[^"\n]*"/
    ARG: /[^,()"\s][^,()"\n]*/
    RAW_TEXT: /`[^`]*`/

    %import common.WS
    %ignore WS
    %ignore /#.*/
    %ignore /\/\/.*/
"""
