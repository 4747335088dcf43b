# vellum

Building blocks for finite state transducers (FSTs) keyed by byte strings,
and byte-level automata that such a transducer can be searched with.

## What is included

- `vellum.pack`: helpers for the packed encoding of transitions —
  `encode_pack_size` / `decode_pack_size` (two 4-bit sizes in one byte),
  `encode_num_trans` (a count up to 63 in one byte, otherwise 0),
  `delta_addr` and `read_packed_uint` (little-endian unsigned integers).
- `vellum.writer`: `Writer`, a buffered writer over a binary stream that
  counts the bytes written (`counter`). It has `write_byte`, `write`,
  `flush`, `reset`, `write_packed_uint_in(v, n)` and `write_packed_uint(v)`;
  `packed_size(n)` gives the number of bytes (1 to 8) a value needs.
- `vellum.merge`: `MergeIterator` walks several sorted key/value iterators
  as one. Each underlying iterator provides `current()`, `next()`,
  `seek(key)` and `close()`, and raises `IteratorDone` when it moves past
  its end. Keys found in more than one iterator get a value from a merge
  function such as `merge_min`, `merge_max` or `merge_sum`, called with the
  values in the order the iterators were given.
- `vellum.utf8`: `new_sequences(start, end)` turns a range of code points
  into `Sequence`s of byte `Range`s that match exactly their UTF-8
  encodings, never including surrogates.
- `vellum.levenshtein`: Levenshtein automata. `LevenshteinAutomatonBuilder`
  (in `vellum.levenshtein.builder`) is built once per maximum edit distance
  and then produces a byte-level `DFA` for any query, in which a multi-byte
  UTF-8 character counts as one edit. Transpositions can be counted as a
  single edit.
- `vellum.regexp`: `Regexp` (in `vellum.regexp.regexp`) compiles a
  Perl-style regular expression into a byte-level DFA.

Both automata offer the same interface: `start()`, `accept(state, byte)`,
`is_match(state)`, `can_match(state)` and `will_always_match(state)`.
`can_match` turns false as soon as no continuation can ever match, which is
what lets a search over an FST prune whole branches.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

Fuzzy matching against a query with at most one edit:

```python
from vellum.levenshtein.builder import LevenshteinAutomatonBuilder

builder = LevenshteinAutomatonBuilder(1, True)
dfa = builder.build_dfa("couchbase", 1)

state = dfa.start()
for b in "coucibase".encode():
    state = dfa.accept(state, b)

print(dfa.is_match(state))          # True
print(dfa.eval(b"coucibase"))       # Exact(distance=1)
```

`DFA.eval` returns `Exact(distance)` within the edit distance and
`AtLeast(distance)` beyond it. Creating the builder is the expensive step
and grows quickly with the distance. A query whose automaton would need more
than 10,000 states raises `TooManyStatesError`
(from `vellum.levenshtein.parametric`).

Matching bytes against a regular expression:

```python
from vellum.regexp.regexp import Regexp

r = Regexp("wat.r")
state = r.start()
for b in b"water":
    state = r.accept(state, b)

print(r.is_match(state), r.can_match(state))   # True True
```

Anchors (`^`, `$`), word boundaries and lazy quantifiers are rejected with
`NoEmptyError`, `NoWordBoundaryError` and `NoLazyError`, and a program over
the size limit (about 10 MB by default, or `size_limit`) with
`CompiledTooBigError`; all are `RegexpError`s from `vellum.regexp.compile`.
Invalid syntax raises `RegexpSyntaxError` from `vellum.regexp.syntax`.

Merging sorted iterators:

```python
from vellum.merge import IteratorDone, MergeIterator, merge_sum


class ListIterator:
    def __init__(self, items):
        self.items, self.pos = items, 0

    def current(self):
        if self.pos < len(self.items):
            return self.items[self.pos]
        return None, 0

    def next(self):
        self.pos += 1
        if self.pos >= len(self.items):
            raise IteratorDone()

    def seek(self, key):
        self.pos = sum(1 for k, _ in self.items if k < key)

    def close(self):
        pass


a = ListIterator([(b"a", 1), (b"c", 3)])
b = ListIterator([(b"a", 2), (b"b", 5)])
with MergeIterator([a, b], merge_sum) as merged:
    print(list(merged))   # [(b'a', 3), (b'b', 5), (b'c', 3)]
```

UTF-8 byte ranges for a code point range:

```python
from vellum.utf8 import new_sequences

for seq in new_sequences(0, 0xFFFF):
    print(seq)   # [0-7F], [C2-DF][80-BF], [E0][A0-BF][80-BF], ...
```

## What this package does not do

There is no FST here: nothing builds a transducer from sorted keys, loads
one from bytes or a file, or looks keys up in it. The packed encoding,
`Writer`, `MergeIterator` and the automata are the parts such a transducer
is built from and searched with, but the transducer itself, and a way to
merge iterators into a new one on disk, are not provided. There is no
command-line tool.