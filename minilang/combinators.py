"""Backtracking combinator parsing with packrat memoization.

A grammar is a subclass of `GrammarParser` whose rules are methods. A rule reads
input from the current position by calling the primitives (`char`, `regex`, ...)
and other rules, and signals failure by raising `NoMatch`. Ordered choice
(`first`), `optional` and `zero_or_more` restore the position when an attempt
fails, so rule bodies can be written as straight-line code.

Rules decorated with `memo` cache their outcome per input position. Rules that
call themselves as their first step (left recursion, e.g. `expr := expr '+' term`)
must be decorated with `memo_left` instead, which grows the match from a failing
seed until it stops getting longer.
"""

import functools
import re
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class NoMatch(Exception):
    code: str
    pos: int

    def __str__(self) -> str:
        return f"No match at position {self.pos} of {self.code!r}"


class _Failed:
    def __repr__(self) -> str:
        return "<failed>"


_FAILED = _Failed()

Rule = Callable[["GrammarParser"], Any]


def memo(rule: Rule) -> Rule:
    """Caches the rule's result (or failure) and end position for every start position"""
    key_name = rule.__name__

    @functools.wraps(rule)
    def wrapper(self: "GrammarParser") -> Any:
        key = (key_name, self.pos)
        if key in self._memo:
            return self._replay(key)
        start = self.pos
        try:
            result = rule(self)
        except NoMatch:
            self._memo[key] = (_FAILED, start)
            raise
        self._memo[key] = (result, self.pos)
        return result

    return wrapper


def memo_left(rule: Rule) -> Rule:
    """Memoization supporting direct left recursion by seed growing"""
    key_name = rule.__name__

    @functools.wraps(rule)
    def wrapper(self: "GrammarParser") -> Any:
        key = (key_name, self.pos)
        if key in self._memo:
            return self._replay(key)

        start = self.pos
        # the recursive call at `start` sees this failing seed and falls through to the next alternative
        self._memo[key] = (_FAILED, start)
        best_result: Any = _FAILED
        best_end = start
        while True:
            self.pos = start
            try:
                result = rule(self)
            except NoMatch:
                break
            if best_result is not _FAILED and self.pos <= best_end:
                break
            best_result, best_end = result, self.pos
            self._memo[key] = (best_result, best_end)

        self.pos = best_end
        if best_result is _FAILED:
            raise self._fail()
        return best_result

    return wrapper


class GrammarParser(Generic[T]):
    WHITESPACE = re.compile(r"\s+")
    SPACE = re.compile(r"[ \t]+")

    def __init__(self, code: str) -> None:
        self.source = code
        self.code = code
        self.pos = 0
        self.furthest = 0
        self._memo: dict[tuple[str, int], tuple[Any, int]] = {}
        self._regex_cache: dict[str, re.Pattern] = {}

    def root(self) -> T:
        raise NotImplementedError

    def try_parse(self) -> T:
        self.pos = 0
        return self.root()

    def source_position(self, pos: int) -> int:
        """Maps a position in `code` to the matching position in `source`"""
        return pos

    # failure bookkeeping

    def _fail(self) -> NoMatch:
        self.furthest = max(self.furthest, self.pos)
        return NoMatch(code=self.code, pos=self.pos)

    def _replay(self, key: tuple[str, int]) -> Any:
        result, end = self._memo[key]
        if result is _FAILED:
            raise self._fail()
        self.pos = end
        return result

    # primitives

    def char(self, c: str) -> str:
        if len(c) == 1 and self.code.startswith(c, self.pos):
            self.pos += 1
            return c
        raise self._fail()

    def string(self, s: str) -> str:
        if self.code.startswith(s, self.pos):
            self.pos += len(s)
            return s
        raise self._fail()

    def regex(self, pattern: str) -> str:
        compiled = self._regex_cache.get(pattern)
        if compiled is None:
            compiled = self._regex_cache[pattern] = re.compile(pattern)
        return self._match(compiled)

    def _match(self, compiled: re.Pattern) -> str:
        match = compiled.match(self.code, self.pos)
        if match is None:
            raise self._fail()
        self.pos = match.end()
        return match.group()

    def whitespace(self, optional: bool = False) -> Optional[str]:
        if optional:
            return self.optional(lambda: self._match(self.WHITESPACE))
        return self._match(self.WHITESPACE)

    def space(self, optional: bool = False) -> Optional[str]:
        if optional:
            return self.optional(lambda: self._match(self.SPACE))
        return self._match(self.SPACE)

    def eoi(self) -> None:
        if self.pos != len(self.code):
            raise self._fail()

    # combinators

    def first(self, *alternatives: Callable[[], R]) -> R:
        start = self.pos
        for alternative in alternatives:
            try:
                return alternative()
            except NoMatch:
                self.pos = start
        raise self._fail()

    def optional(self, fn: Callable[[], R]) -> Optional[R]:
        start = self.pos
        try:
            return fn()
        except NoMatch:
            self.pos = start
            return None

    def zero_or_more(self, fn: Callable[[], R]) -> list[R]:
        items: list[R] = []
        while True:
            start = self.pos
            try:
                item = fn()
            except NoMatch:
                self.pos = start
                return items
            items.append(item)
            if self.pos == start:
                return items
