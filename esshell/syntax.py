"""Rewriting rules that build the abstract syntax tree."""

from __future__ import annotations

import itertools
from typing import Callable, Optional

from esshell.tree import NodeKind, Tree, mk


class SyntaxFault(Exception):
    """A syntax error found while building a tree."""


# returned by redirect when a here document cannot be queued
ERRORNODE = Tree(NodeKind.WORD, "")

# marks where the redirected command goes in a redirection
PLACEHOLDER = Tree(NodeKind.REDIR)

_devfd_ids = itertools.count()


def treecons(car: Optional[Tree], cdr: Optional[Tree]) -> Tree:
    """Make a new tree list cell."""
    if cdr is not None and cdr.kind is not NodeKind.LIST:
        raise ValueError("treecons: tail is not a list")
    return mk(NodeKind.LIST, car, cdr)


def treecons2(car: Optional[Tree], cdr: Optional[Tree]) -> Optional[Tree]:
    """Make a list cell, or return the tail alone if ``car`` is None."""
    if cdr is not None and cdr.kind is not NodeKind.LIST:
        raise ValueError("treecons2: tail is not a list")
    return cdr if car is None else mk(NodeKind.LIST, car, cdr)


def treeappend(head: Optional[Tree], tail: Optional[Tree]) -> Optional[Tree]:
    """Destructively append ``tail`` to the list ``head``."""
    if head is None:
        return tail
    p = head
    while True:
        if p.kind not in (NodeKind.LIST, NodeKind.REDIR):
            raise ValueError("treeappend: not a list")
        if p.cdr is None:
            break
        p = p.cdr
    p.cdr = tail
    return head


def treeconsend(head: Optional[Tree], tail: Optional[Tree]) -> Tree:
    """Destructively add a node at the end of a list."""
    return treeappend(head, treecons(tail, None))


def treeconsend2(head: Optional[Tree], tail: Optional[Tree]) -> Optional[Tree]:
    """Like ``treeconsend``, but adding nothing if ``tail`` is None."""
    if tail is None:
        if head is not None and head.kind not in (NodeKind.LIST, NodeKind.REDIR):
            raise ValueError("treeconsend2: not a list")
        return head
    return treeappend(head, treecons(tail, None))


def thunkify(tree: Optional[Tree]) -> Tree:
    """Wrap a tree in thunk braces unless it is one already."""
    if tree is not None and (
        tree.kind is NodeKind.THUNK
        or (
            tree.kind is NodeKind.LIST
            and tree.car is not None
            and tree.car.kind is NodeKind.THUNK
            and tree.cdr is None
        )
    ):
        return tree
    return mk(NodeKind.THUNK, tree)


def _firstis(t: Optional[Tree], s: str) -> bool:
    if t is None or t.kind is not NodeKind.LIST:
        return False
    first = t.car
    if first is None or first.kind is not NodeKind.WORD:
        return False
    return first.car == s


def prefix(s: str, t: Optional[Tree]) -> Tree:
    """Prefix a tree list with a word."""
    return treecons(mk(NodeKind.WORD, s), t)


def flatten(t: Optional[Tree], sep: str) -> Tree:
    """Flatten the value of a tree into one word joined by ``sep``."""
    return mk(
        NodeKind.CALL,
        prefix("%flatten", treecons(mk(NodeKind.QWORD, sep), treecons(t, None))),
    )


def backquote(ifs: Optional[Tree], body: Optional[Tree]) -> Tree:
    """Make a backquote command."""
    return mk(
        NodeKind.CALL,
        prefix("%backquote", treecons(flatten(ifs, ""), treecons(body, None))),
    )


def fnassign(name: Optional[Tree], defn: Optional[Tree]) -> Tree:
    """Turn a function definition into an assignment to ``fn-name``."""
    return mk(
        NodeKind.ASSIGN, mk(NodeKind.CONCAT, mk(NodeKind.WORD, "fn-"), name), defn
    )


def mklambda(params: Optional[Tree], body: Optional[Tree]) -> Tree:
    """Make a lambda."""
    return mk(NodeKind.LAMBDA, params, body)


def mkseq(op: str, t1: Optional[Tree], t2: Optional[Tree]) -> Optional[Tree]:
    """Join two commands under ``op``, merging existing ``op`` lists."""
    if op == "%seq":
        if t1 is None:
            return t2
        if t2 is None:
            return t1
    sametail = _firstis(t2, op)
    tail = t2.cdr if sametail else treecons(thunkify(t2), None)
    if _firstis(t1, op):
        return treeappend(t1, tail)
    t1 = thunkify(t1)
    if sametail:
        t2.cdr = treecons(t1, tail)
        return t2
    return prefix(op, treecons(t1, tail))


def mkpipe(t1: Optional[Tree], outfd: int, infd: int, t2: Optional[Tree]) -> Tree:
    """Assemble a pipe from its commands (destructive)."""
    pipetail = _firstis(t2, "%pipe")
    tail = prefix(
        str(outfd),
        prefix(str(infd), t2.cdr if pipetail else treecons(thunkify(t2), None)),
    )
    if _firstis(t1, "%pipe"):
        return treeappend(t1, tail)
    t1 = thunkify(t1)
    if pipetail:
        t2.cdr = treecons(t1, tail)
        return t2
    return prefix("%pipe", treecons(t1, tail))


def redirect(
    t: Optional[Tree], heredoc_queue: Optional[Callable[[Tree], bool]] = None
) -> Optional[Tree]:
    """Rewrite queued redirections so they wrap the command they apply to.

    ``heredoc_queue`` is called with each here-document redirection and
    returns False if it cannot be queued; ``ERRORNODE`` is then returned.
    """
    if t is None:
        return None
    if t.kind is not NodeKind.REDIR:
        return t
    r = t.car
    t = t.cdr
    while r.kind is NodeKind.REDIR:
        t = treeappend(t, r.car)
        r = r.cdr
    p = r
    while p.car is not PLACEHOLDER:
        p = p.cdr
        if p is None or p.kind is not NodeKind.LIST:
            raise ValueError("redirect: no placeholder in redirection")
    if _firstis(r, "%heredoc"):
        if heredoc_queue is None:
            raise SyntaxFault("here document with no queue to read it")
        if not heredoc_queue(r):
            return ERRORNODE
    p.car = thunkify(redirect(t, heredoc_queue))
    return r


def mkredircmd(cmd: str, fd: int) -> Tree:
    """Start a redirection command for a descriptor."""
    return prefix(cmd, prefix(str(fd), None))


def mkredir(cmd: Tree, file: Optional[Tree]) -> Tree:
    """Complete a redirection with its file and a placeholder."""
    word = None
    if file is not None and file.kind is NodeKind.THUNK:
        if _firstis(cmd, "%open"):
            op = "%readfrom"
        elif _firstis(cmd, "%create"):
            op = "%writeto"
        else:
            raise SyntaxFault("bad /dev/fd redirection")
        var = mk(NodeKind.WORD, f"_devfd{next(_devfd_ids)}")
        cmd = treecons(mk(NodeKind.WORD, op), treecons(var, None))
        word = treecons(mk(NodeKind.VAR, var), None)
    elif not _firstis(cmd, "%heredoc") and not _firstis(cmd, "%here"):
        file = mk(NodeKind.CALL, prefix("%one", treecons(file, None)))
    cmd = treeappend(cmd, treecons(file, treecons(PLACEHOLDER, None)))
    if word is not None:
        cmd = mk(NodeKind.REDIR, word, cmd)
    return cmd


def mkclose(fd: int) -> Tree:
    """Make a ``%close`` node with a placeholder."""
    return prefix("%close", prefix(str(fd), treecons(PLACEHOLDER, None)))


def mkdup(fd0: int, fd1: int) -> Tree:
    """Make a ``%dup`` node with a placeholder."""
    return prefix(
        "%dup", prefix(str(fd0), prefix(str(fd1), treecons(PLACEHOLDER, None)))
    )


def redirappend(tree: Optional[Tree], r: Tree) -> Tree:
    """Add a redirection before the command nodes of a tree (destructive)."""
    while r.kind is NodeKind.REDIR:
        tree = treeappend(tree, r.car)
        r = r.cdr
    if r.kind is not NodeKind.LIST:
        raise ValueError("redirappend: redirection is not a list")
    prev = None
    t = tree
    while t is not None and t.kind is NodeKind.REDIR:
        prev = t
        t = t.cdr
    if t is not None and t.kind is not NodeKind.LIST:
        raise ValueError("redirappend: command is not a list")
    node = mk(NodeKind.REDIR, r, t)
    if prev is None:
        return node
    prev.cdr = node
    return tree


def mkmatch(subj: Optional[Tree], cases: Optional[Tree]) -> Tree:
    """Rewrite a match into an ``if`` over ``~`` tests of a local variable."""
    if cases is None:
        return thunkify(None)
    varname = "matchexpr"
    sass = treecons2(mk(NodeKind.ASSIGN, mk(NodeKind.WORD, varname), subj), None)
    svar = mk(NodeKind.VAR, mk(NodeKind.WORD, varname))
    matches = None
    while cases is not None:
        pattlist = cases.car.car
        cmd = cases.car.cdr
        if pattlist is not None and pattlist.kind is not NodeKind.LIST:
            pattlist = treecons(pattlist, None)
        test = treecons(
            thunkify(mk(NodeKind.MATCH, svar, pattlist)), treecons(cmd, None)
        )
        matches = treeappend(matches, test)
        cases = cases.cdr
    return mk(NodeKind.LOCAL, sass, thunkify(prefix("if", matches)))


def firstprepend(first: Optional[Tree], args: Optional[Tree]) -> Optional[Tree]:
    """Insert a command word after any redirections and before its arguments."""
    if first is None:
        return args
    prev = None
    t = args
    while t is not None and t.kind is NodeKind.REDIR:
        prev = t
        t = t.cdr
    if t is not None and t.kind is not NodeKind.LIST:
        raise ValueError("firstprepend: arguments are not a list")
    cell = treecons(first, t)
    if prev is None:
        return cell
    prev.cdr = cell
    return args