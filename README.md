# esshell

Building blocks of the *es* extensible shell as a Python library: shell
values, parse trees, a tokenizer, the tree rewriting a parser uses,
wildcard matching, word splitting, a printf-like formatter, a variable
table with dynamic binding and environment export, and signal handling.
Each module can be used on its own.

## Modules

| Module | Contents |
| --- | --- |
| `esshell.tree` | `NodeKind`, `Tree` and the `mk` node constructor |
| `esshell.term` | Shell values: `Term`, `Closure`, `Binding`, `mkstr`, `termcat` |
| `esshell.util` | `EsError`, `OpenKind`, `eopen`, `esstrerror`, `isabsolute`, `streq2` |
| `esshell.opt` | `OptionParser`, a getopt-style parser over argument lists |
| `esshell.signals` | `signumber`, `signame`, `sigmessage`, `issilentsignal`, `SigEffect`, `SignalState` |
| `esshell.status` | Exit statuses: `istrue`, `exitstatus`, `mkstatus`, `status_message` |
| `esshell.match` | Wildcard matching with quoting: `match`, `listmatch`, `extractmatches` |
| `esshell.split` | Splitting on separator characters: `Splitter`, `fsplit` |
| `esshell.printfmt` | `Formatter` with installable conversions, `strfmt`, `fprint`, `eprint` |
| `esshell.syntax` | Tree rewriting: `mkseq`, `mkpipe`, `mkredir`, `redirect`, `mkmatch` and more |
| `esshell.lexer` | The tokenizer: `Lexer`, `Token`, `TokenKind` |
| `esshell.variables` | `VarStore`: global variables, `push`/`pop`, settor functions, `mkenv` |

Errors the shell reports are raised as `EsError`, which carries the place
it came from in `where` and the shell's exception list in `exception`.

## Examples

Matching words against patterns and extracting the wildcarded parts:

```python
from esshell.match import match, extractmatches

match("main.c", "*.c")                    # True
extractmatches(["main.c"], ["*.c"])       # [Term(text='main')]
```

Splitting words:

```python
from esshell.split import fsplit

fsplit(" ", ["one two  three"], True)    # runs of separators count as one
fsplit(":", ["a::b"], False)             # empty fields are kept
```

Tokenizing a command line:

```python
from esshell.lexer import Lexer

for token in Lexer("echo hello | wc -l\n"):
    print(token.kind, token.value)
```

Signals and statuses:

```python
from esshell.signals import signumber, signame
from esshell.status import istrue, exitstatus

signame(signumber("sigint"))   # 'sigint'
istrue(["0", ""])              # True
exitstatus(["3"])              # 3
```

Formatting:

```python
from esshell.printfmt import strfmt

strfmt("%5d|%-4s|", 42, "ab")  # '   42|ab  |'
strfmt("%#x", 255)             # '0xff'
```

Variables and the exported environment:

```python
from esshell.term import mkstr
from esshell.variables import VarStore

store = VarStore()
store.define("path", None, [mkstr("/bin"), mkstr("/usr/bin")])
with store.pushed("x", [mkstr("1")]):
    store.lookup("x")          # [Term(text='1')]
store.mkenv()                  # ['path=/bin\x0f/usr/bin']
```

## What the package does not do

It has no parser grammar that builds whole trees from tokens, no evaluator
that runs trees, no built-in commands, no tracking of child processes and
no resource-limit handling. There is no command to start a shell; the
modules are parts to build one from.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.