"""
Mock code runner.

STUB: nothing submitted is ever executed. `run` is a lexical check that looks
for a loop-like token and a print-like token and returns one of two canned
outputs. Any text containing those words "passes"; a correct program that
uses other spellings "fails".
"""

LOOP_TOKENS = ("for", "while", "range")
PRINT_TOKENS = ("print", "cout", "console.log", "System.out")

EXPECTED_PATTERN = "\n".join([
    "*",
    "* *",
    "* * *",
    "* * * *",
    "* * * * *",
])

ERROR_OUTPUT = (
    "Error: Code does not seem to generate the expected pattern.\n"
    "Please check your logic and try again.\n"
    "\n"
    "Hint: You need a loop and print statements."
)

DEFAULT_TEMPLATE = '# Write your Python code here\nfor i in range(1, 6):\n    print("* " * i)'


def has_loop(code: str) -> bool:
    return any(tok in code for tok in LOOP_TOKENS)


def has_print(code: str) -> bool:
    return any(tok in code for tok in PRINT_TOKENS)


def run(code: str) -> str:
    """Return the canned triangle if `code` looks like a loop that prints, else the hint text."""
    if has_loop(code) and has_print(code):
        return EXPECTED_PATTERN
    return ERROR_OUTPUT


def is_expected(output: str) -> bool:
    return output == EXPECTED_PATTERN
