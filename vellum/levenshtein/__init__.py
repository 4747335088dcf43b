"""Levenshtein automata over UTF-8 encoded bytes."""